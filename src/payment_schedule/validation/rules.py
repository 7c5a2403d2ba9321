"""Schedule rules for validation.

Each rule inspects a schedule snapshot and records blocking errors and/or
advisory warnings on a shared outcome. Rules never short-circuit each
other: every applicable rule runs and all findings accumulate.

Rules (in evaluation order):
- ReconciliationRule: schedule sum within the monetary tolerance
- PercentageSumRule: summed shares close to 100%
- AdvancePaymentRule: first term marked as advance and under its ceiling
- FinalPaymentRule: last term not disproportionately small
- DueDateRule: no shared due dates, adjacent dates spaced apart
- VolumeRule: term count sensible for the contract size
- TermRule: per-term date, amount and share checks
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Protocol, runtime_checkable

from payment_schedule.core.config import RuleConfig
from payment_schedule.core.messages import ValidationMessages
from payment_schedule.schemas.contract import ContractContext, ValidationMode
from payment_schedule.schemas.term import PaymentTerm
from payment_schedule.utils.dates import (
    has_duplicate_dates,
    parse_date,
    validate_min_date_gap,
)
from payment_schedule.utils.numeric import (
    HUNDRED,
    calculate_percentage,
    format_amount,
    format_percentage,
    to_decimal,
)


@dataclass(frozen=True)
class ScheduleSnapshot:
    """Immutable view of the schedule handed to every rule.

    Attributes:
        context: Contract facts the schedule must fit.
        terms: Coerced terms in schedule order (never empty).
        total_amount: Sum of all term amounts.
        today: Reference date for past-date checks.
    """

    context: ContractContext
    terms: tuple[PaymentTerm, ...]
    total_amount: Decimal
    today: date

    @property
    def contract_amount(self) -> Decimal:
        return self.context.contract_amount

    def share(self, term: PaymentTerm) -> Decimal:
        """Share of a term in the contract amount, rounded to 2 places."""
        return calculate_percentage(term.amount, self.contract_amount)


@dataclass
class RuleOutcome:
    """Accumulates findings in the order rules report them."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def error(self, message: str) -> None:
        self.errors.append(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)


@runtime_checkable
class ScheduleRule(Protocol):
    """Protocol for schedule rules.

    Implementations must not raise for malformed data; problems are
    reported on the outcome instead.
    """

    def check(self, snapshot: ScheduleSnapshot, outcome: RuleOutcome) -> None:
        """Inspect the snapshot and record findings on the outcome.

        Args:
            snapshot: The schedule under validation
            outcome: Collector for errors and warnings
        """
        ...


class _ConfiguredRule:
    def __init__(self, config: RuleConfig, messages: ValidationMessages) -> None:
        self.config = config
        self.messages = messages


class ReconciliationRule(_ConfiguredRule):
    """Schedule sum must match the contract amount within a relative tolerance.

    Example:
        ```python
        # 1% tolerance on 100,000,000 allows 99,000,000..101,000,000
        rule = ReconciliationRule(RuleConfig(), ValidationMessages())
        ```
    """

    def check(self, snapshot: ScheduleSnapshot, outcome: RuleOutcome) -> None:
        contract = snapshot.contract_amount
        if contract <= 0:
            return

        slack = contract * self.config.total_amount_tolerance_percent / HUNDRED
        total = snapshot.total_amount
        if total > contract + slack:
            outcome.error(self.messages.total_exceeds_contract)
        elif total < contract - slack:
            outcome.error(
                self.messages.format(
                    "total_less_than_contract", difference=format_amount(contract - total)
                )
            )


class PercentageSumRule(_ConfiguredRule):
    """Summed shares must be within a few hundredths of 100%.

    Independent of ReconciliationRule: for large contracts an amount inside
    the monetary tolerance can still drift visibly in percentage terms.
    """

    def check(self, snapshot: ScheduleSnapshot, outcome: RuleOutcome) -> None:
        if snapshot.contract_amount <= 0:
            return

        total_percentage = calculate_percentage(snapshot.total_amount, snapshot.contract_amount)
        if abs(total_percentage - HUNDRED) > self.config.percentage_sum_tolerance:
            outcome.error(
                self.messages.format(
                    "percentage_sum_not_100", total=format_percentage(total_percentage)
                )
            )


class AdvancePaymentRule(_ConfiguredRule):
    """The first term should be labelled as an advance and stay under its ceiling."""

    def check(self, snapshot: ScheduleSnapshot, outcome: RuleOutcome) -> None:
        if snapshot.contract_amount <= 0:
            return

        first = snapshot.terms[0]
        if len(snapshot.terms) > 1 and not self._is_marked_advance(first):
            outcome.warn(self.messages.first_term_not_advance)

        if snapshot.share(first) > self.config.advance_payment_max_percentage:
            outcome.error(
                self.messages.format(
                    "term_advance_percentage",
                    maximum=format_percentage(self.config.advance_payment_max_percentage),
                )
            )

    def _is_marked_advance(self, term: PaymentTerm) -> bool:
        description = term.description.casefold()
        return any(keyword.casefold() in description for keyword in self.config.advance_keywords)


class FinalPaymentRule(_ConfiguredRule):
    """The last term of a multi-term schedule should not be too small."""

    def check(self, snapshot: ScheduleSnapshot, outcome: RuleOutcome) -> None:
        if snapshot.contract_amount <= 0 or len(snapshot.terms) < 2:
            return

        if snapshot.share(snapshot.terms[-1]) < self.config.final_payment_min_percentage:
            outcome.warn(
                self.messages.format(
                    "term_final_percentage_low",
                    minimum=format_percentage(self.config.final_payment_min_percentage),
                )
            )


class DueDateRule(_ConfiguredRule):
    """Due dates must be distinct and should be spaced apart."""

    def check(self, snapshot: ScheduleSnapshot, outcome: RuleOutcome) -> None:
        dates = [term.due_date for term in snapshot.terms if term.due_date]
        if len(dates) < 2:
            return

        if has_duplicate_dates(dates):
            outcome.error(self.messages.term_duplicate_date)
        if not validate_min_date_gap(dates, self.config.min_due_date_gap_days):
            outcome.warn(
                self.messages.format(
                    "term_gap_too_small", days=self.config.min_due_date_gap_days
                )
            )


class VolumeRule(_ConfiguredRule):
    """Term count should suit the contract size."""

    def check(self, snapshot: ScheduleSnapshot, outcome: RuleOutcome) -> None:
        count = len(snapshot.terms)
        if (
            snapshot.contract_amount > self.config.high_value_threshold
            and count < self.config.min_terms_for_high_value
        ):
            outcome.warn(
                self.messages.format(
                    "too_few_terms_high_value",
                    threshold=format_amount(self.config.high_value_threshold),
                    minimum=self.config.min_terms_for_high_value,
                )
            )
        if count > self.config.max_payment_terms:
            outcome.warn(
                self.messages.format("too_many_terms", maximum=self.config.max_payment_terms)
            )


class TermRule(_ConfiguredRule):
    """Run the single-term checks over every term of the schedule.

    The first-term advance ceiling is left to AdvancePaymentRule so that a
    schedule reports it once.
    """

    def check(self, snapshot: ScheduleSnapshot, outcome: RuleOutcome) -> None:
        for index, term in enumerate(snapshot.terms):
            label = term.term_number or index + 1
            for message in term_errors(
                term.due_date,
                term.amount,
                index,
                snapshot.context,
                self.config,
                self.messages,
                snapshot.today,
            ):
                outcome.error(self.messages.for_term(label, message))


def term_errors(
    due_date: Any,
    amount: Any,
    index: int,
    context: ContractContext,
    config: RuleConfig,
    messages: ValidationMessages,
    today: date,
) -> list[str]:
    """Date, amount and minimum-share checks for one term.

    Args:
        due_date: Due date as entered (ISO string, date, or anything else)
        amount: Amount as entered; non-numeric input counts as 0
        index: Position of the term in the schedule
        context: Contract facts
        config: Rule thresholds
        messages: Message catalogue
        today: Reference date for the past-date check

    Returns:
        Error messages, empty when the term is acceptable.
    """
    errors: list[str] = []

    if isinstance(due_date, datetime):
        due_text = due_date.date().isoformat()
    elif isinstance(due_date, date):
        due_text = due_date.isoformat()
    else:
        due_text = str(due_date).strip() if due_date is not None else ""

    if not due_text:
        errors.append(messages.term_due_date_required)
    else:
        due = parse_date(due_text)
        if due is None:
            errors.append(messages.invalid_date)
        else:
            if context.mode is ValidationMode.CREATE and index > 0 and due < today:
                errors.append(messages.term_due_date_past)
            start = context.start
            if start is not None and due < start:
                errors.append(messages.term_before_start_date)
            end = context.end
            if end is not None and due > end:
                errors.append(messages.term_after_end_date)

    value = to_decimal(amount)
    if value <= 0:
        errors.append(messages.term_amount_positive)
    elif value < config.min_term_amount:
        errors.append(
            messages.format("term_amount_min", minimum=format_amount(config.min_term_amount))
        )

    if context.contract_amount > 0:
        share = calculate_percentage(value, context.contract_amount)
        if share < config.min_payment_percentage:
            errors.append(
                messages.format(
                    "term_small_percentage",
                    percentage=format_percentage(share),
                    minimum=format_percentage(config.min_payment_percentage),
                )
            )

    return errors


def get_default_rules(
    config: RuleConfig,
    messages: ValidationMessages,
) -> list[ScheduleRule]:
    """Build the standard rule chain in evaluation order.

    Args:
        config: Rule thresholds
        messages: Message catalogue

    Returns:
        Rules ready to be run by ScheduleValidator
    """
    return [
        ReconciliationRule(config, messages),
        PercentageSumRule(config, messages),
        AdvancePaymentRule(config, messages),
        FinalPaymentRule(config, messages),
        DueDateRule(config, messages),
        VolumeRule(config, messages),
        TermRule(config, messages),
    ]
