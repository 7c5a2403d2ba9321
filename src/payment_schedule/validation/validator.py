"""Schedule validator: runs the rule chain over a payment schedule."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal
from typing import Any

from payment_schedule.core.config import RuleConfig
from payment_schedule.core.exceptions import InvalidContractAmountError
from payment_schedule.core.messages import ValidationMessages
from payment_schedule.results.types import ValidationResult
from payment_schedule.schemas.contract import ContractContext
from payment_schedule.schemas.term import (
    PaymentStatus,
    coerce_status,
    coerce_term,
    term_fields,
)
from payment_schedule.utils.dates import parse_date
from payment_schedule.utils.numeric import (
    ZERO,
    calculate_percentage,
    format_percentage,
    to_decimal,
)
from payment_schedule.validation.rules import (
    RuleOutcome,
    ScheduleRule,
    ScheduleSnapshot,
    get_default_rules,
    term_errors,
)

logger = logging.getLogger(__name__)


class ScheduleValidator:
    """Validates payment schedules against a rule configuration.

    The validator holds no state between calls: every call is a fresh pass
    over the input it is given, so it can be shared freely and called
    speculatively to preview an edit.

    Example:
        ```python
        from payment_schedule import ContractContext, ScheduleValidator

        validator = ScheduleValidator()
        context = ContractContext(
            contract_amount=100_000_000,
            start_date="2025-01-01",
            end_date="2025-12-31",
        )
        result = validator.validate(context, [
            {"description": "Advance payment", "dueDate": "2025-01-15", "amount": 30_000_000},
            {"description": "Final payment", "dueDate": "2025-06-30", "amount": 70_000_000},
        ])

        if not result.is_valid:
            for error in result.errors:
                print(error)
        ```
    """

    def __init__(
        self,
        config: RuleConfig | None = None,
        messages: ValidationMessages | None = None,
        rules: list[ScheduleRule] | None = None,
    ) -> None:
        """Initialize the validator.

        Args:
            config: Rule thresholds. Uses defaults if not provided.
            messages: Message catalogue. Uses defaults if not provided.
            rules: Replacement rule chain. Uses the standard chain if not provided.
        """
        self.config = config or RuleConfig()
        self.messages = messages or ValidationMessages()
        self.rules = rules if rules is not None else get_default_rules(self.config, self.messages)

    def validate(
        self,
        context: ContractContext,
        terms: Iterable[Any],
        today: date | None = None,
    ) -> ValidationResult:
        """Validate a whole schedule.

        Args:
            context: Contract facts the schedule must fit.
            terms: Terms in schedule order; raw mappings are coerced first.
            today: Reference date for past-date checks (defaults to today).

        Returns:
            ValidationResult with accumulated errors, warnings and the total.

        Raises:
            InvalidContractAmountError: If the contract amount is negative.
        """
        _require_non_negative(context)
        contract_amount = context.contract_amount
        schedule = tuple(coerce_term(raw, contract_amount) for raw in terms)

        if not schedule:
            errors = [self.messages.no_payment_terms] if contract_amount > 0 else []
            return ValidationResult(errors=errors, total_amount=ZERO)

        total = sum((term.amount for term in schedule), ZERO)
        snapshot = ScheduleSnapshot(
            context=context,
            terms=schedule,
            total_amount=total,
            today=today or date.today(),
        )
        outcome = RuleOutcome()
        for rule in self.rules:
            rule.check(snapshot, outcome)

        logger.debug(
            "Validated %d terms against %s: %d errors, %d warnings",
            len(schedule),
            contract_amount,
            len(outcome.errors),
            len(outcome.warnings),
        )
        return ValidationResult(
            errors=outcome.errors,
            warnings=outcome.warnings,
            total_amount=total,
        )

    def validate_term(
        self,
        due_date: Any,
        amount: Any,
        index: int,
        context: ContractContext,
        terms: Sequence[Any] = (),
        today: date | None = None,
    ) -> list[str]:
        """Checks for a single term while it is being edited.

        Besides the per-term checks of the full pass, this reports the
        first-term advance ceiling and a due date already used by another
        term of the schedule.

        Args:
            due_date: Due date as entered.
            amount: Amount as entered.
            index: Position of the term in the schedule.
            context: Contract facts.
            terms: The rest of the schedule, used for the duplicate-date check.
            today: Reference date for past-date checks.

        Returns:
            Error messages without a term prefix.
        """
        _require_non_negative(context)
        errors = term_errors(
            due_date,
            amount,
            index,
            context,
            self.config,
            self.messages,
            today or date.today(),
        )

        if index == 0 and context.contract_amount > 0:
            share = calculate_percentage(to_decimal(amount), context.contract_amount)
            if share > self.config.advance_payment_max_percentage:
                errors.append(
                    self.messages.format(
                        "term_advance_percentage",
                        maximum=format_percentage(self.config.advance_payment_max_percentage),
                    )
                )

        due = parse_date(due_date)
        if due is not None:
            for position, other in enumerate(terms):
                if position == index:
                    continue
                if parse_date(term_fields(other).get("due_date")) == due:
                    errors.append(self.messages.term_duplicate_date)
                    break

        return errors

    def validate_form(self, term: Any) -> list[str]:
        """Field checks of the term edit form.

        Args:
            term: A PaymentTerm or the raw form state as a mapping.

        Returns:
            Error messages, empty when the form can be submitted.
        """
        fields = self.config.fields
        data = term_fields(term)
        errors: list[str] = []

        description = data.get("description")
        description = description.strip() if isinstance(description, str) else ""
        if not description:
            errors.append(self.messages.term_description_required)
        elif len(description) < fields.description_min_length:
            errors.append(
                self.messages.format(
                    "term_description_too_short", minimum=fields.description_min_length
                )
            )
        elif len(description) > fields.description_max_length:
            errors.append(
                self.messages.format(
                    "term_description_too_long", maximum=fields.description_max_length
                )
            )

        due_date = data.get("due_date")
        if due_date is None or (isinstance(due_date, str) and not due_date.strip()):
            errors.append(self.messages.term_due_date_required)
        elif parse_date(due_date) is None:
            errors.append(self.messages.invalid_date)

        amount = to_decimal(data.get("amount"), default=Decimal("NaN"))
        if not amount.is_finite():
            errors.append(self.messages.term_amount_required)
        elif amount <= 0:
            errors.append(self.messages.term_amount_positive)

        notes = data.get("notes")
        if isinstance(notes, str) and len(notes) > fields.notes_max_length:
            errors.append(
                self.messages.format("term_notes_too_long", maximum=fields.notes_max_length)
            )

        if coerce_status(data.get("status")) is PaymentStatus.PAID:
            paid_date = data.get("paid_date")
            if paid_date is None or (isinstance(paid_date, str) and not paid_date.strip()):
                errors.append(self.messages.paid_date_required)
            elif parse_date(paid_date) is None:
                errors.append(self.messages.paid_date_invalid)
            if to_decimal(data.get("paid_amount")) <= 0:
                errors.append(self.messages.paid_amount_positive)

        return errors


def _require_non_negative(context: ContractContext) -> None:
    if context.contract_amount < 0:
        raise InvalidContractAmountError(context.contract_amount)


def validate_schedule(
    context: ContractContext,
    terms: Iterable[Any],
    config: RuleConfig | None = None,
    messages: ValidationMessages | None = None,
    today: date | None = None,
) -> ValidationResult:
    """Validate a schedule with a one-off validator.

    See ``ScheduleValidator.validate``.
    """
    return ScheduleValidator(config, messages).validate(context, terms, today=today)


def validate_single_term(
    due_date: Any,
    amount: Any,
    index: int,
    context: ContractContext,
    terms: Sequence[Any] = (),
    config: RuleConfig | None = None,
    messages: ValidationMessages | None = None,
    today: date | None = None,
) -> list[str]:
    """Live-edit checks for one term. See ``ScheduleValidator.validate_term``."""
    return ScheduleValidator(config, messages).validate_term(
        due_date, amount, index, context, terms, today=today
    )


def validate_term_form(
    term: Any,
    config: RuleConfig | None = None,
    messages: ValidationMessages | None = None,
) -> list[str]:
    """Edit-form checks for one term. See ``ScheduleValidator.validate_form``."""
    return ScheduleValidator(config, messages).validate_form(term)
