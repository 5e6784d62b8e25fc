from pydantic import BaseModel, EmailStr, Field

# Modelo para cadastro e login
class AuthRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)  # limite do bcrypt
