"""Result types returned by validators, editor operations and the lifecycle."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field, field_serializer, model_validator

from payment_schedule.schemas.term import PaymentStatus, PaymentTerm
from payment_schedule.utils.numeric import ZERO


def _number(value: Decimal) -> float | int:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


class ValidationResult(BaseModel):
    """Outcome of a validation pass.

    Errors block submission; warnings are advisory only.
    """

    errors: list[str] = Field(
        default_factory=list,
        description="Violations that must be resolved before saving",
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Advisory messages that never block saving",
    )
    total_amount: Decimal = Field(default=ZERO, description="Sum of all term amounts")

    @field_serializer("total_amount", when_used="json")
    def _serialize_total(self, value: Decimal) -> float | int:
        return _number(value)

    @property
    def is_valid(self) -> bool:
        """True when nothing blocks submission."""
        return not self.errors

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


class DeleteResult(BaseModel):
    """Either the shortened schedule or the reason the deletion was refused."""

    terms: list[PaymentTerm] | None = Field(default=None, description="Schedule after deletion")
    error: str | None = Field(default=None, description="Why the deletion was refused")

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> DeleteResult:
        """Ensure a result is either a success or a refusal, never both."""
        if (self.terms is None) == (self.error is None):
            raise ValueError("exactly one of terms or error must be provided")
        return self

    @property
    def refused(self) -> bool:
        return self.error is not None


class TransitionResult(BaseModel):
    """Either the updated term or the errors that rejected the transition."""

    term: PaymentTerm | None = Field(default=None, description="Term after the transition")
    errors: list[str] = Field(default_factory=list, description="Why the transition was rejected")

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> TransitionResult:
        """Ensure an accepted transition carries no errors and vice versa."""
        if (self.term is None) == (not self.errors):
            raise ValueError("provide either a term or a non-empty error list")
        return self

    @property
    def accepted(self) -> bool:
        return self.term is not None


class ImportRowError(BaseModel):
    """A row of a bulk status import that could not be applied."""

    row: int = Field(description="1-based row number in the import")
    term_number: int | None = Field(default=None, description="Term number given in the row")
    error_message: str = Field(description="Why the row was rejected")


class UpdatedPayment(BaseModel):
    """A row of a bulk status import that was applied."""

    row: int = Field(description="1-based row number in the import")
    term_id: int | str | None = Field(default=None)
    term_number: int = Field(description="Term number of the updated term")
    status: PaymentStatus = Field(description="Status after the update")
    previous_status: PaymentStatus = Field(description="Status before the update")


class StatusImportReport(BaseModel):
    """Summary of a bulk status import."""

    total_records: int = Field(default=0)
    success_count: int = Field(default=0)
    error_count: int = Field(default=0)
    errors: list[ImportRowError] = Field(default_factory=list)
    updated: list[UpdatedPayment] = Field(default_factory=list)
    terms: list[PaymentTerm] = Field(
        default_factory=list,
        description="The schedule with every accepted row applied",
    )

    @property
    def success(self) -> bool:
        return self.error_count == 0


class PaymentSummary(BaseModel):
    """Collection progress of a schedule."""

    term_count: int = Field(default=0)
    scheduled_total: Decimal = Field(default=ZERO, description="Sum of term amounts")
    paid_total: Decimal = Field(default=ZERO, description="Sum of paid amounts of paid terms")
    remaining: Decimal = Field(default=ZERO, description="Scheduled total not yet collected")
    status_counts: dict[PaymentStatus, int] = Field(default_factory=dict)

    @field_serializer("scheduled_total", "paid_total", "remaining", when_used="json")
    def _serialize_totals(self, value: Decimal) -> float | int:
        return _number(value)
