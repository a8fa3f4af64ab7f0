from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint

from app.db.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PointBalanceRecord(Base):
    __tablename__ = "point_balances"
    __table_args__ = (UniqueConstraint("user_id", "program_id", name="uq_point_balances_user_program"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    program_id = Column(String(64), nullable=False)
    balance = Column(Integer, nullable=False, default=0)
    last_updated = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


# Pydantic Models for Request/Response Validation
class PointBalanceCreate(BaseModel):
    program_id: str = Field(..., min_length=1)
    balance: int = Field(..., ge=0)

    @field_validator("program_id")
    @classmethod
    def strip_program_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("program_id must be non-empty")
        return v


class PointBalanceUpdate(BaseModel):
    balance: int = Field(..., ge=0)


class PointBalanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    program_id: str
    program_name: Optional[str] = None
    program_type: Optional[str] = None
    balance: int
    last_updated: datetime


class PointBalanceListResponse(BaseModel):
    balances: list[PointBalanceResponse]
    total_points: int
