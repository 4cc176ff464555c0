from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class TeamSchema(BaseModel):
    id: int
    name: str
    initials: str
    description: str
    is_active: bool
    member_count: int = 0
    model_config = ConfigDict(from_attributes=True)

class TeamMemberSchema(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    model_config = ConfigDict(from_attributes=True)

# PUBLIC payload, what clients send
class TeamCreatePayload(BaseModel):
    name: str = Field(..., min_length=1)
    initials: Optional[str] = Field(None, max_length=5)
    description: str = ""
    model_config = ConfigDict(extra="forbid")

class TeamUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    initials: Optional[str] = Field(None, max_length=5)
    description: Optional[str] = None
    is_active: Optional[bool] = None

class TeamMemberAdd(BaseModel):
    employee_id: int
    model_config = ConfigDict(extra="forbid")
