from __future__ import annotations
from enum import Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Boolean, ForeignKey, Enum as SAEnum, text
from core.database import Base

class EmploymentStatus(str, Enum):
    active = "Active"
    inactive = "Inactive"
    terminated = "Terminated"

class Employee(Base):
    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(primary_key=True)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    status: Mapped[EmploymentStatus] = mapped_column(
        SAEnum(EmploymentStatus, name="employment_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=EmploymentStatus.active,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, server_default=text("1"), default=True, nullable=False)
    deleted: Mapped[bool] = mapped_column(Boolean, server_default=text("0"), default=False, nullable=False)

    # optional link to login user
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True, unique=True, index=True)

    # relationships
    user = relationship("User", back_populates="employee")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
