"""Database models."""

from .equipment import (
    EquipmentBase,
    EquipmentCreate,
    EquipmentRead,
    EquipmentRecord,
    EquipmentStatus,
    EquipmentUpdate,
    utcnow,
)

__all__ = [
    "EquipmentBase",
    "EquipmentCreate",
    "EquipmentRead",
    "EquipmentRecord",
    "EquipmentStatus",
    "EquipmentUpdate",
    "utcnow",
]
