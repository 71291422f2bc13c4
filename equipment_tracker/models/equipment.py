"""Equipment record persistence and validation models."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import sqlalchemy as sa
from pydantic import ConfigDict, field_validator
from sqlmodel import Field, SQLModel


class EquipmentStatus(str, Enum):
    AVAILABLE = "Available"
    IN_USE = "In Use"
    MAINTENANCE = "Maintenance"
    OUT_OF_SERVICE = "Out of Service"

    def __str__(self) -> str:
        return self.value


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what SQLite hands back on reads."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# Stored as the human readable value ("In Use") rather than the member name
_STATUS_TYPE = sa.Enum(
    EquipmentStatus,
    name="equipment_status",
    native_enum=False,
    length=32,
    values_callable=lambda enum: [member.value for member in enum],
)


class EquipmentBase(SQLModel):
    name: str = Field(min_length=1, index=True)
    type: str = Field(min_length=1, index=True)
    location: str = Field(min_length=1, index=True)
    status: EquipmentStatus = Field(sa_type=_STATUS_TYPE, index=True)
    serial_number: Optional[str] = Field(default=None, description="Manufacturer serial number")
    notes: Optional[str] = None


class EquipmentRecord(EquipmentBase, table=True):
    """Persisted equipment row. Only the record store touches instances of this class."""

    __tablename__ = "equipment"

    id: Optional[int] = Field(default=None, primary_key=True)
    # Plain DateTime column: naive UTC in, naive UTC out
    created_at: datetime = Field(default_factory=utcnow, sa_type=sa.DateTime(), nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=sa.DateTime(), nullable=False)


class EquipmentCreate(EquipmentBase):
    """Validated input for adding a new item."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class EquipmentUpdate(SQLModel):
    """Partial update; only the fields a caller supplies are applied."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[str] = Field(default=None, min_length=1)
    location: Optional[str] = Field(default=None, min_length=1)
    status: Optional[EquipmentStatus] = None
    serial_number: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("name", "type", "location", "status")
    @classmethod
    def _required_fields_cannot_be_cleared(cls, value):
        if value is None:
            raise ValueError("required field cannot be cleared")
        return value

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class EquipmentRead(EquipmentBase):
    """Detached snapshot of a stored record."""

    id: int
    created_at: datetime
    updated_at: datetime


__all__ = [
    "EquipmentStatus",
    "EquipmentBase",
    "EquipmentRecord",
    "EquipmentCreate",
    "EquipmentUpdate",
    "EquipmentRead",
    "utcnow",
]
