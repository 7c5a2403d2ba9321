"""List operations on a payment schedule.

Every operation takes the current schedule and returns a new one; the input
list and its terms are never mutated. None of them validates the result:
callers re-run the validator on the returned schedule.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, timedelta
from decimal import Decimal
from typing import Any

from payment_schedule.core.config import RuleConfig
from payment_schedule.core.exceptions import InvalidContractAmountError, TermIndexError
from payment_schedule.core.messages import ValidationMessages
from payment_schedule.results.types import DeleteResult
from payment_schedule.schemas.term import (
    PaymentStatus,
    PaymentTerm,
    amount_from_percentage,
    coerce_term,
    coerce_terms,
    is_contract_document,
    percentage_from_amount,
    term_fields,
)
from payment_schedule.utils.dates import parse_date
from payment_schedule.utils.numeric import (
    CENT,
    HUNDRED,
    ZERO,
    round_amount,
    to_decimal,
)

logger = logging.getLogger(__name__)


def _check_index(terms: Sequence[Any], index: int) -> None:
    if not 0 <= index < len(terms):
        raise TermIndexError(index, len(terms))


def allocate_share(
    terms: Sequence[Any],
    contract_amount: Any,
    config: RuleConfig | None = None,
) -> Decimal:
    """Share to give a term about to be added.

    A schedule that is not yet fully allocated gets the configured default
    share. Once the existing terms reach 100%, the newcomer gets an equal
    share ``100 / (count + 1)`` so that adding a term does not immediately
    over-allocate the contract.

    Args:
        terms: Current schedule.
        contract_amount: Contract total used to derive missing shares.
        config: Rule thresholds. Uses defaults if not provided.

    Returns:
        The share in percent, at most two decimal places.
    """
    config = config or RuleConfig()
    schedule = coerce_terms(terms, contract_amount)
    allocated = sum((term.percentage for term in schedule), ZERO)
    if allocated >= HUNDRED:
        return (HUNDRED / (len(schedule) + 1)).quantize(CENT)
    return config.default_term_percentage


def add_default_term(
    terms: Sequence[Any],
    contract_amount: Any,
    contract_start_date: Any = None,
    config: RuleConfig | None = None,
    today: date | None = None,
    messages: ValidationMessages | None = None,
) -> list[PaymentTerm]:
    """Append a pre-filled term to the schedule.

    Args:
        terms: Current schedule.
        contract_amount: Contract total.
        contract_start_date: Effective date; new terms are never due before it.
        config: Rule thresholds. Uses defaults if not provided.
        today: Reference date (defaults to today).
        messages: Message catalogue for the default description.

    Returns:
        A new schedule ending with the added term.

    Raises:
        InvalidContractAmountError: If the contract amount is negative.

    Example:
        ```python
        terms = add_default_term([], 100_000_000, "2025-01-01", today=date(2024, 12, 1))
        # [PaymentTerm(term_number=1, description="Installment 1",
        #              due_date="2025-01-31", amount=10000000, percentage=10, ...)]
        ```
    """
    config = config or RuleConfig()
    messages = messages or ValidationMessages()
    total = to_decimal(contract_amount)
    if total < 0:
        raise InvalidContractAmountError(total)

    schedule = coerce_terms(terms, total)
    number = max((term.term_number for term in schedule), default=0) + 1
    share = allocate_share(schedule, total, config)

    anchor = today or date.today()
    start = parse_date(contract_start_date)
    if start is not None and start > anchor:
        anchor = start

    term = PaymentTerm(
        term_number=number,
        description=messages.format("default_term_description", number=number),
        due_date=(anchor + timedelta(days=config.default_due_days)).isoformat(),
        amount=round_amount(total * share / HUNDRED),
        percentage=share,
        status=PaymentStatus.UNPAID,
    )
    return [*schedule, term]


def edit_term(
    terms: Sequence[Any],
    index: int,
    patch: Any,
    contract_amount: Any = None,
) -> list[PaymentTerm]:
    """Replace fields of the term at ``index``.

    Only the fields present in ``patch`` change. With a positive contract
    amount, a changed amount re-derives the share and a changed share
    re-derives the amount; when both change, the amount wins. Moving a term
    out of ``paid`` clears its payment fields.

    Args:
        terms: Current schedule.
        index: Position of the term to edit.
        patch: Mapping (snake or camel keys) or PaymentTerm with new values.
        contract_amount: Contract total for the amount/share derivation.

    Returns:
        A new schedule with the edited term in place.

    Raises:
        TermIndexError: If ``index`` is out of range.
    """
    schedule = coerce_terms(terms, contract_amount)
    _check_index(schedule, index)

    current = schedule[index]
    if isinstance(patch, PaymentTerm):
        changes = patch.model_dump(exclude_unset=True)
    else:
        changes = term_fields(patch)
    updated = coerce_term({**current.model_dump(), **changes})

    total = to_decimal(contract_amount)
    amount_changed = "amount" in changes and updated.amount != current.amount
    share_changed = "percentage" in changes and updated.percentage != current.percentage
    if total > 0:
        if amount_changed:
            updated = updated.model_copy(
                update={"percentage": percentage_from_amount(updated.amount, total)}
            )
        elif share_changed:
            updated = updated.model_copy(
                update={"amount": amount_from_percentage(updated.percentage, total)}
            )

    if current.is_paid and not updated.is_paid:
        updated = updated.model_copy(update={"paid_amount": ZERO, "paid_date": None})

    return [*schedule[:index], updated, *schedule[index + 1 :]]


def delete_term(
    terms: Sequence[Any],
    index: int,
    config: RuleConfig | None = None,
    messages: ValidationMessages | None = None,
) -> DeleteResult:
    """Remove the term at ``index`` unless the contract-document policy forbids it.

    When the policy requires a contract file, the last remaining term that
    carries the contract-document marker cannot be deleted.

    Args:
        terms: Current schedule.
        index: Position of the term to delete.
        config: Rule thresholds. Uses defaults if not provided.
        messages: Message catalogue. Uses defaults if not provided.

    Returns:
        DeleteResult holding either the shortened schedule or the refusal.

    Raises:
        TermIndexError: If ``index`` is out of range.
    """
    config = config or RuleConfig()
    messages = messages or ValidationMessages()
    schedule = coerce_terms(terms)
    _check_index(schedule, index)

    policy = config.attachments
    target = schedule[index]
    remaining = [*schedule[:index], *schedule[index + 1 :]]

    if (
        policy.require_contract_file
        and is_contract_document(target, policy)
        and not any(is_contract_document(term, policy) for term in remaining)
    ):
        logger.warning(
            "Refused to delete term %d: it is the last contract document", target.term_number
        )
        return DeleteResult(error=messages.cant_delete_last_contract)

    return DeleteResult(terms=remaining)


def move_term(terms: Sequence[Any], from_index: int, to_index: int) -> list[PaymentTerm]:
    """Move a term to a new position, shifting the others."""
    schedule = coerce_terms(terms)
    _check_index(schedule, from_index)
    _check_index(schedule, to_index)

    term = schedule.pop(from_index)
    schedule.insert(to_index, term)
    return schedule


def renumber_terms(terms: Sequence[Any]) -> list[PaymentTerm]:
    """Give terms contiguous display numbers in their current order."""
    return [
        term.model_copy(update={"term_number": number})
        for number, term in enumerate(coerce_terms(terms), start=1)
    ]
