"""Payment term schema and the amount/percentage derivations.

``coerce_term`` is the boundary for data arriving from outside (API
payloads, spreadsheets, form state): it absorbs strings, nulls and missing
keys so that everything downstream works on a fully typed ``PaymentTerm``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from payment_schedule.core.config import AttachmentPolicy
from payment_schedule.utils.dates import parse_date
from payment_schedule.utils.numeric import HUNDRED, ZERO, to_decimal


class PaymentStatus(str, Enum):
    """Collection status of a single installment."""

    UNPAID = "unpaid"
    INVOICED = "invoiced"
    PAID = "paid"
    OVERDUE = "overdue"


class PaymentTerm(BaseModel):
    """One scheduled installment of a contract's total value.

    Field names are snake_case in Python; the camelCase names used on the
    wire (``termNumber``, ``dueDate``, ...) are accepted as aliases.

    Example:
        ```python
        term = PaymentTerm(
            term_number=1,
            description="Advance payment",
            due_date="2025-03-01",
            amount=Decimal("30000000"),
            percentage=Decimal("30"),
        )
        payload = term.model_dump(mode="json", by_alias=True)
        ```
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int | str | None = Field(
        default=None,
        description="Stable identifier, absent until the term is persisted",
    )
    term_number: int = Field(
        default=0,
        description="Display ordinal, not an identity; 0 when not yet numbered",
    )
    description: str = Field(default="", description="Free-text label of the installment")
    due_date: str = Field(
        default="",
        description="Due date in ISO format (YYYY-MM-DD); kept as text so invalid input can be reported",
    )
    amount: Decimal = Field(default=ZERO, description="Amount in the contract currency")
    percentage: Decimal = Field(
        default=ZERO,
        description="Share of the contract amount, derived from amount when the total is known",
    )
    status: PaymentStatus = Field(default=PaymentStatus.UNPAID)
    paid_amount: Decimal = Field(default=ZERO, description="Collected amount, only when paid")
    paid_date: str | None = Field(default=None, description="Collection date, only when paid")
    notes: str | None = Field(default=None)

    # Contract-document marker consumed by the deletion policy
    document_type: str | None = Field(default=None, description="Attached document category")
    file_name: str | None = Field(default=None, description="Attached document file name")

    @field_serializer("amount", "percentage", "paid_amount", when_used="json")
    def _serialize_number(self, value: Decimal) -> float | int:
        if value == value.to_integral_value():
            return int(value)
        return float(value)

    @property
    def due(self) -> date | None:
        """Parsed due date, or None when empty or invalid."""
        return parse_date(self.due_date)

    @property
    def is_paid(self) -> bool:
        return self.status is PaymentStatus.PAID


def percentage_from_amount(amount: Any, contract_amount: Any) -> Decimal:
    """Derive a term's share from its amount.

    When ``contract_amount`` is not positive nothing can be derived and the
    amount is returned unchanged; callers check the total before deriving.
    """
    total = to_decimal(contract_amount)
    value = to_decimal(amount)
    if total <= 0:
        return value
    return value / total * HUNDRED


def amount_from_percentage(percentage: Any, contract_amount: Any) -> Decimal:
    """Derive a term's amount from its share.

    Like ``percentage_from_amount``, returns the input unchanged when
    ``contract_amount`` is not positive.
    """
    total = to_decimal(contract_amount)
    value = to_decimal(percentage)
    if total <= 0:
        return value
    return value * total / HUNDRED


_WIRE_KEYS = {
    "termNumber": "term_number",
    "dueDate": "due_date",
    "paidAmount": "paid_amount",
    "paidDate": "paid_date",
    "documentType": "document_type",
    "fileName": "file_name",
}

_STATUS_VALUES = {status.value: status for status in PaymentStatus}


def coerce_term(raw: Any, contract_amount: Any = None) -> PaymentTerm:
    """Normalize arbitrary input into a ``PaymentTerm``. Never raises.

    Numbers default to 0, text to an empty string and unknown statuses to
    ``unpaid``. When the share is missing but amount and contract amount are
    known, the share is derived from the amount.

    Args:
        raw: A PaymentTerm, a mapping with snake_case or camelCase keys, or
            anything else (treated as an empty term).
        contract_amount: Contract total used to derive a missing share.

    Returns:
        A fully typed PaymentTerm.
    """
    data = term_fields(raw)

    amount = to_decimal(data.get("amount"))
    percentage = to_decimal(data.get("percentage"))
    total = to_decimal(contract_amount)
    if percentage == 0 and amount > 0 and total > 0:
        percentage = percentage_from_amount(amount, total)

    return PaymentTerm(
        id=_coerce_id(data.get("id")),
        term_number=_coerce_int(data.get("term_number")),
        description=_coerce_text(data.get("description")),
        due_date=_coerce_date_text(data.get("due_date")),
        amount=amount,
        percentage=percentage,
        status=coerce_status(data.get("status")) or PaymentStatus.UNPAID,
        paid_amount=to_decimal(data.get("paid_amount")),
        paid_date=_coerce_date_text(data.get("paid_date")) or None,
        notes=_coerce_text(data.get("notes")) or None,
        document_type=_coerce_text(data.get("document_type")) or None,
        file_name=_coerce_text(data.get("file_name")) or None,
    )


def term_fields(raw: Any) -> dict[str, Any]:
    """Raw field values of a term keyed by snake_case field name."""
    if isinstance(raw, PaymentTerm):
        return raw.model_dump()
    if isinstance(raw, Mapping):
        return {_WIRE_KEYS.get(str(key), str(key)): value for key, value in raw.items()}
    return {}


def coerce_terms(raws: Any, contract_amount: Any = None) -> list[PaymentTerm]:
    """Coerce a list of raw terms, or an API envelope with a ``data`` list."""
    if isinstance(raws, Mapping):
        raws = raws.get("data")
    if raws is None or isinstance(raws, (str, bytes)) or not isinstance(raws, Iterable):
        return []
    return [coerce_term(raw, contract_amount) for raw in raws]


def coerce_status(value: Any) -> PaymentStatus | None:
    """Map a status name onto PaymentStatus, or None if it is unknown."""
    if isinstance(value, PaymentStatus):
        return value
    if isinstance(value, str):
        return _STATUS_VALUES.get(value.strip().lower())
    return None


def is_contract_document(term: PaymentTerm, policy: AttachmentPolicy) -> bool:
    """True if the term carries the contract-document marker.

    A term qualifies by its document type tag or by a file name ending in
    the canonical contract extension.
    """
    if term.document_type and term.document_type.strip().lower() in {
        kind.lower() for kind in policy.contract_document_types
    }:
        return True
    if term.file_name:
        suffix = "." + policy.preferred_contract_format.lower().lstrip(".")
        return term.file_name.strip().lower().endswith(suffix)
    return False


def _coerce_id(value: Any) -> int | str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        # Text ids are opaque: "007" and "7" name different terms
        return value.strip() or None
    return None


def _coerce_int(value: Any) -> int:
    number = to_decimal(value)
    return max(0, int(number))


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return str(value)
    return ""


def _coerce_date_text(value: Any) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        return ""
    text = value.strip()
    # Timestamps such as "2025-01-31T00:00:00Z" keep their calendar day
    if "T" in text and parse_date(text[:10]) is not None:
        return text[:10]
    return text
