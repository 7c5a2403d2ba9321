"""Result types for validation, editing and status updates."""

from payment_schedule.results.types import (
    DeleteResult,
    ImportRowError,
    PaymentSummary,
    StatusImportReport,
    TransitionResult,
    UpdatedPayment,
    ValidationResult,
)

__all__ = [
    "ValidationResult",
    "DeleteResult",
    "TransitionResult",
    "StatusImportReport",
    "ImportRowError",
    "UpdatedPayment",
    "PaymentSummary",
]
