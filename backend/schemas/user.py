from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

# Schema for user registration requests
class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)

# Schema for user authentication credentials
class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

# Output schema for user profile details
class UserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    point: int = 0
    is_guest: bool = False
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True

# Schema for login / guest login responses
class LoginResponse(BaseModel):
    message: str
    user: UserResponse
    access_token: str
    token_type: str = "bearer"

class MessageResponse(BaseModel):
    message: str
