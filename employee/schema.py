from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional

from .models import EmploymentStatus


class EmployeeSchema(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: EmailStr
    status: EmploymentStatus
    is_active: bool
    user_id: Optional[int] = None
    model_config = ConfigDict(from_attributes=True)

# PUBLIC payload, what clients send
class EmployeeCreatePayload(BaseModel):
    first_name: str
    last_name: str
    email: EmailStr
    status: EmploymentStatus = EmploymentStatus.active
    user_id: Optional[int] = None
    model_config = ConfigDict(extra="forbid")


class EmployeeUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    status: Optional[EmploymentStatus] = None
    is_active: Optional[bool] = None
    user_id: Optional[int] = None
