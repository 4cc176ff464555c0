from typing import Optional
from pydantic import BaseModel, EmailStr, ConfigDict

class UserSchema(BaseModel):
    id: int
    email: EmailStr
    first_name: str
    last_name: str
    is_active: bool
    is_manager: bool
    model_config = ConfigDict(from_attributes=True)

class UserCreate(BaseModel):
    email: EmailStr
    first_name: str
    last_name: str
    is_manager: bool = False
    model_config = ConfigDict(extra="forbid")

class UserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_active: Optional[bool] = None
    is_manager: Optional[bool] = None
