from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional

class BabyCreate(BaseModel):
    name: str = Field(..., min_length=1)
    birth_date: date
    birth_weight_grams: Optional[int] = Field(None, gt=0)
    gender: str = Field(..., max_length=6)  # coluna String(6)

class BabyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    birth_date: Optional[date] = None
    birth_weight_grams: Optional[int] = Field(None, gt=0)
    gender: Optional[str] = Field(None, max_length=6)

class BabyResponse(BaseModel):
    id: int
    name: str
    birth_date: date
    birth_weight_grams: Optional[int] = None
    gender: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
