from __future__ import annotations
from datetime import datetime
from sqlalchemy import String, Text, Boolean, DateTime, ForeignKey, text
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from core.database import Base

class Team(Base):
    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    initials: Mapped[str] = mapped_column(String(5), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text(), nullable=False, default="")
    is_active: Mapped[bool] = mapped_column(Boolean, server_default=text("1"), default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # relationships
    members = relationship("TeamMember", back_populates="team", cascade="all, delete-orphan")

class TeamMember(Base):
    __tablename__ = "team_members"

    team_id: Mapped[int] = mapped_column(
        ForeignKey("teams.id", ondelete="CASCADE"),
        primary_key=True,
    )
    employee_id: Mapped[int] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,  # common filter: WHERE employee_id=...
    )

    # relationships
    team = relationship("Team", back_populates="members")
    employee = relationship("Employee")
