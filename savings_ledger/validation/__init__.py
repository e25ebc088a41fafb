"""Request validation package."""

from savings_ledger.validation.validator import (
    RoomValidationError,
    RoomValidator,
    ensure_valid,
)

__all__ = ["RoomValidationError", "RoomValidator", "ensure_valid"]
