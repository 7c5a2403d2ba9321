"""Contract context consumed by the schedule validator."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from payment_schedule.utils.dates import parse_date
from payment_schedule.utils.numeric import ZERO, to_decimal


class ValidationMode(str, Enum):
    """Whether the schedule belongs to a new or an existing contract."""

    CREATE = "create"
    EDIT = "edit"


class ContractContext(BaseModel):
    """Read-only facts about the contract a schedule belongs to.

    In ``edit`` mode past due dates are allowed, since historical schedules
    legitimately contain them.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    contract_amount: Decimal = Field(
        default=ZERO,
        description="Total the schedule must reconcile to",
    )
    start_date: str | None = Field(default=None, description="Contract effective date")
    end_date: str | None = Field(default=None, description="Contract expiry date")
    mode: ValidationMode = Field(default=ValidationMode.CREATE)

    @field_validator("contract_amount", mode="before")
    @classmethod
    def _lenient_amount(cls, v: Any) -> Decimal:
        return to_decimal(v)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _iso_dates(cls, v: Any) -> str | None:
        if isinstance(v, date):
            parsed = parse_date(v)
            return parsed.isoformat() if parsed else None
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @property
    def start(self) -> date | None:
        return parse_date(self.start_date)

    @property
    def end(self) -> date | None:
        return parse_date(self.end_date)
