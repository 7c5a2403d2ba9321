"""Tests for the schedule validator."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from payment_schedule import (
    ContractContext,
    FieldRules,
    InvalidContractAmountError,
    RuleConfig,
    ScheduleRule,
    ScheduleValidator,
    ValidationMessages,
    ValidationMode,
    validate_schedule,
    validate_single_term,
    validate_term_form,
)
from payment_schedule.validation import (
    ReconciliationRule,
    RuleOutcome,
    ScheduleSnapshot,
    get_default_rules,
)

TODAY = date(2025, 1, 1)
MESSAGES = ValidationMessages()


def make_context(amount=100_000_000, mode=ValidationMode.CREATE):
    return ContractContext(
        contract_amount=amount,
        start_date="2025-01-01",
        end_date="2025-12-31",
        mode=mode,
    )


def make_terms(*rows):
    """Build raw terms from (description, due_date, amount) tuples."""
    return [
        {"termNumber": number, "description": description, "dueDate": due, "amount": amount}
        for number, (description, due, amount) in enumerate(rows, start=1)
    ]


VALID_TERMS = make_terms(
    ("Advance payment", "2025-01-15", 30_000_000),
    ("Progress payment", "2025-04-01", 40_000_000),
    ("Final payment", "2025-09-01", 30_000_000),
)


class TestDegenerateSchedules:
    """Tests for empty schedules and invalid contract amounts."""

    def test_empty_schedule_zero_contract(self) -> None:
        """Test nothing is reported for an empty schedule without a value."""
        result = validate_schedule(ContractContext(contract_amount=0), [], today=TODAY)

        assert result.errors == []
        assert result.warnings == []
        assert result.total_amount == Decimal("0")

    def test_empty_schedule_positive_contract(self) -> None:
        """Test a contract with a value needs at least one term."""
        result = validate_schedule(make_context(), [], today=TODAY)

        assert result.errors == [MESSAGES.no_payment_terms]
        assert result.total_amount == Decimal("0")

    def test_negative_contract_amount_raises(self) -> None:
        """Test a negative contract amount is a programming error."""
        with pytest.raises(InvalidContractAmountError):
            validate_schedule(ContractContext(contract_amount=-1), VALID_TERMS, today=TODAY)

        with pytest.raises(ValueError):
            validate_schedule(ContractContext(contract_amount=-1), [], today=TODAY)

    def test_zero_contract_with_terms(self) -> None:
        """Test share rules are skipped but term checks still run."""
        result = validate_schedule(
            ContractContext(contract_amount=0),
            make_terms(("Advance", "2025-02-01", 500)),
            today=TODAY,
        )

        assert result.errors == ["Term 1: Amount must be at least 1,000"]
        assert result.total_amount == Decimal("500")

    def test_out_of_range_amounts(self) -> None:
        """Test amounts too large to represent count as missing."""
        result = validate_schedule(
            make_context(),
            make_terms(("Advance", "2025-02-01", "9e999999"), ("Final", "2025-06-01", "9e999999")),
            today=TODAY,
        )

        assert result.total_amount == Decimal("0")
        assert "Term 1: Amount must be greater than 0" in result.errors
        assert "Term 2: Amount must be greater than 0" in result.errors


class TestValidSchedule:
    """Tests for a schedule that satisfies every rule."""

    def test_no_findings(self) -> None:
        """Test a clean schedule."""
        result = validate_schedule(make_context(), VALID_TERMS, today=TODAY)

        assert result.errors == []
        assert result.warnings == []
        assert result.is_valid
        assert result.total_amount == Decimal("100000000")

    def test_idempotent(self) -> None:
        """Test repeated validation of the same input yields the same result."""
        validator = ScheduleValidator()
        terms = make_terms(
            ("First", "2025-01-15", 50_000_000),
            ("Second", "2025-01-18", 20_000_000),
        )

        first = validator.validate(make_context(), terms, today=TODAY)
        second = validator.validate(make_context(), terms, today=TODAY)

        assert first == second
        assert first.errors

    def test_input_not_mutated(self) -> None:
        """Test raw input dictionaries are left untouched."""
        terms = make_terms(("Advance", "2025-01-15", "100,000,000"))
        snapshot = [dict(t) for t in terms]

        validate_schedule(make_context(), terms, today=TODAY)

        assert terms == snapshot

    def test_string_amounts_are_coerced(self) -> None:
        """Test amounts arriving as text are validated like numbers."""
        terms = make_terms(
            ("Advance payment", "2025-01-15", "30,000,000"),
            ("Progress payment", "2025-04-01", "40000000"),
            ("Final payment", "2025-09-01", 30_000_000.0),
        )

        result = validate_schedule(make_context(), terms, today=TODAY)

        assert result.errors == []
        assert result.total_amount == Decimal("100000000")


class TestReconciliation:
    """Tests for the monetary and percentage reconciliation rules."""

    def test_exact_sum_has_no_reconciliation_errors(self) -> None:
        """Test an exactly matching sum produces no reconciliation messages."""
        for amounts in ([100_000_000], [33_333_333, 33_333_333, 33_333_334]):
            terms = make_terms(
                *(
                    ("Advance" if i == 0 else "Installment", f"2025-0{i + 2}-01", amount)
                    for i, amount in enumerate(amounts)
                )
            )
            config = RuleConfig(advance_payment_max_percentage=Decimal("100"))

            result = validate_schedule(make_context(), terms, config=config, today=TODAY)

            assert not any("Total of payment terms" in e for e in result.errors)
            assert not any("add up to" in e for e in result.errors)

    def test_tolerance_boundary(self) -> None:
        """Test the exact upper bound passes and one cent more fails."""
        context = make_context()

        at_bound = make_terms(
            ("Advance", "2025-02-01", 50_000_000),
            ("Final", "2025-06-01", 51_000_000),
        )
        result = validate_schedule(context, at_bound, today=TODAY)
        assert MESSAGES.total_exceeds_contract not in result.errors

        over_bound = make_terms(
            ("Advance", "2025-02-01", 50_000_000),
            ("Final", "2025-06-01", "51000000.01"),
        )
        result = validate_schedule(context, over_bound, today=TODAY)
        assert MESSAGES.total_exceeds_contract in result.errors

    def test_lower_tolerance_boundary(self) -> None:
        """Test the exact lower bound passes."""
        terms = make_terms(
            ("Advance", "2025-02-01", 50_000_000),
            ("Final", "2025-06-01", 49_000_000),
        )

        result = validate_schedule(make_context(), terms, today=TODAY)

        assert not any("less than the contract value" in e for e in result.errors)

    def test_total_less_reports_difference(self) -> None:
        """Test the shortfall is reported with its amount."""
        terms = make_terms(
            ("Advance", "2025-02-01", 40_000_000),
            ("Final", "2025-06-01", 50_000_000),
        )

        result = validate_schedule(make_context(), terms, today=TODAY)

        assert "Total of payment terms is 10,000,000 less than the contract value" in result.errors

    def test_percentage_check_is_tighter(self) -> None:
        """Test a sum inside the monetary tolerance can still miss 100%."""
        terms = make_terms(
            ("Advance", "2025-02-01", 300_000_000),
            ("Second", "2025-04-01", 300_000_000),
            ("Final", "2025-06-01", 395_000_000),
        )

        result = validate_schedule(make_context(1_000_000_000), terms, today=TODAY)

        assert not any("Total of payment terms" in e for e in result.errors)
        assert (
            "Payment terms currently add up to 99.5% and should add up to 100%"
            in result.errors
        )

    def test_percentage_tolerance_is_configurable(self) -> None:
        """Test the percentage tolerance is separate from the monetary one."""
        terms = make_terms(
            ("Advance", "2025-02-01", 300_000_000),
            ("Second", "2025-04-01", 300_000_000),
            ("Final", "2025-06-01", 395_000_000),
        )
        config = RuleConfig(percentage_sum_tolerance=Decimal("1"))

        result = validate_schedule(make_context(1_000_000_000), terms, config=config, today=TODAY)

        assert result.errors == []


class TestEndToEnd:
    """Whole-schedule scenarios."""

    def test_advance_ceiling_is_the_only_error(self) -> None:
        """Test an over-large first term is reported once and nothing else fails."""
        context = make_context()
        terms = [
            {"termNumber": 1, "amount": 50_000_000, "dueDate": context.start_date},
            {"termNumber": 2, "amount": 50_000_000, "dueDate": context.end_date},
        ]
        config = RuleConfig(
            total_amount_tolerance_percent=Decimal("0.5"),
            advance_payment_max_percentage=Decimal("40"),
        )

        result = validate_schedule(context, terms, config=config, today=TODAY)

        assert result.errors == ["Advance payment should not exceed 40% of the contract value"]

    def test_both_reconciliation_errors_fire(self) -> None:
        """Test the monetary and percentage checks report independently."""
        terms = make_terms(
            ("Advance payment", "2025-02-01", 30_000_000),
            ("Progress payment", "2025-05-01", 30_000_000),
            ("Final payment", "2025-08-01", 30_000_000),
        )
        config = RuleConfig(total_amount_tolerance_percent=Decimal("2"))

        result = validate_schedule(make_context(), terms, config=config, today=TODAY)

        assert result.errors == [
            "Total of payment terms is 10,000,000 less than the contract value",
            "Payment terms currently add up to 90% and should add up to 100%",
        ]


class TestAdvanceAndFinalPayment:
    """Tests for the first- and last-term policies."""

    def test_first_term_not_marked_as_advance(self) -> None:
        """Test an unlabelled first term is a warning."""
        terms = make_terms(
            ("Installment 1", "2025-01-15", 50_000_000),
            ("Installment 2", "2025-06-01", 50_000_000),
        )

        result = validate_schedule(make_context(), terms, today=TODAY)

        assert result.errors == []
        assert result.warnings == [MESSAGES.first_term_not_advance]

    def test_advance_keywords_case_insensitive(self) -> None:
        """Test any configured synonym marks the advance."""
        for description in ("ADVANCE", "Initial deposit", "Tạm ứng đợt 1", "TẠM ỨNG"):
            terms = make_terms(
                (description, "2025-01-15", 50_000_000),
                ("Final", "2025-06-01", 50_000_000),
            )

            result = validate_schedule(make_context(), terms, today=TODAY)

            assert MESSAGES.first_term_not_advance not in result.warnings

    def test_single_term_needs_no_advance_label(self) -> None:
        """Test a one-term schedule is not expected to be an advance."""
        terms = make_terms(("Full payment", "2025-01-15", 100_000_000))
        config = RuleConfig(advance_payment_max_percentage=Decimal("100"))

        result = validate_schedule(make_context(), terms, config=config, today=TODAY)

        assert result.warnings == []
        assert result.errors == []

    def test_advance_ceiling(self) -> None:
        """Test a first term above the ceiling is an error."""
        terms = make_terms(
            ("Advance", "2025-01-15", 80_000_000),
            ("Final", "2025-06-01", 20_000_000),
        )

        result = validate_schedule(make_context(), terms, today=TODAY)

        assert result.errors == ["Advance payment should not exceed 70% of the contract value"]

    def test_small_final_payment(self) -> None:
        """Test a small last term is only a warning."""
        terms = make_terms(
            ("Advance", "2025-01-15", 60_000_000),
            ("Progress", "2025-04-01", 35_000_000),
            ("Retention", "2025-09-01", 5_000_000),
        )

        result = validate_schedule(make_context(), terms, today=TODAY)

        assert result.errors == []
        assert result.warnings == [
            "The final payment should be at least 10% of the contract value"
        ]


class TestDueDates:
    """Tests for date integrity across the schedule."""

    def test_duplicate_due_dates(self) -> None:
        """Test two terms on one day is an error."""
        terms = make_terms(
            ("Advance", "2025-03-01", 50_000_000),
            ("Final", "2025-03-01", 50_000_000),
        )

        result = validate_schedule(make_context(), terms, today=TODAY)

        assert result.errors == [MESSAGES.term_duplicate_date]
        assert "Due dates should be at least 7 days apart" in result.warnings

    def test_tight_spacing(self) -> None:
        """Test close due dates are a warning."""
        terms = make_terms(
            ("Advance", "2025-03-01", 50_000_000),
            ("Final", "2025-03-04", 50_000_000),
        )

        result = validate_schedule(make_context(), terms, today=TODAY)

        assert result.errors == []
        assert result.warnings == ["Due dates should be at least 7 days apart"]

    def test_empty_dates_ignored_by_schedule_rule(self) -> None:
        """Test blank dates are left to the per-term checks."""
        terms = make_terms(
            ("Advance", "", 50_000_000),
            ("Final", "", 50_000_000),
        )

        result = validate_schedule(make_context(), terms, today=TODAY)

        assert MESSAGES.term_duplicate_date not in result.errors
        assert result.errors == [
            "Term 1: Please select a due date",
            "Term 2: Please select a due date",
        ]


class TestVolume:
    """Tests for term count policies."""

    def test_high_value_needs_more_terms(self) -> None:
        """Test high-value contracts expect several terms."""
        terms = make_terms(
            ("Advance", "2025-01-15", 300_000_000),
            ("Final", "2025-06-01", 300_000_000),
        )

        result = validate_schedule(make_context(600_000_000), terms, today=TODAY)

        assert result.errors == []
        assert result.warnings == [
            "High-value contracts (>500,000,000) should have at least 3 payment terms"
        ]

    def test_threshold_is_exclusive(self) -> None:
        """Test a contract exactly at the threshold is not high value."""
        terms = make_terms(
            ("Advance", "2025-01-15", 250_000_000),
            ("Final", "2025-06-01", 250_000_000),
        )

        result = validate_schedule(make_context(500_000_000), terms, today=TODAY)

        assert result.warnings == []

    def test_too_many_terms(self) -> None:
        """Test long schedules are a warning."""
        terms = make_terms(
            ("Advance", "2025-01-15", 10_000_000),
            *((f"Installment {n}", f"2025-{n:02d}-01", 10_000_000) for n in range(2, 12)),
        )

        result = validate_schedule(make_context(110_000_000), terms, today=TODAY)

        assert result.errors == []
        assert "There are many payment terms (>10), the schedule may be hard to manage" in (
            result.warnings
        )


class TestPerTermChecks:
    """Tests for per-term checks inside the full pass."""

    def test_invalid_date(self) -> None:
        """Test an unparsable date is reported for its term."""
        terms = make_terms(
            ("Advance", "2025-01-15", 50_000_000),
            ("Final", "2025-13-45", 50_000_000),
        )

        result = validate_schedule(make_context(), terms, today=TODAY)

        assert result.errors == ["Term 2: Invalid date"]

    def test_past_date_in_create_mode(self) -> None:
        """Test later terms may not be due in the past for new contracts."""
        context = ContractContext(contract_amount=100_000_000)
        terms = make_terms(
            ("Advance", "2024-12-01", 50_000_000),
            ("Final", "2024-12-20", 50_000_000),
        )

        result = validate_schedule(context, terms, today=TODAY)

        assert result.errors == ["Term 2: Due date should not be in the past"]

    def test_past_date_allowed_in_edit_mode(self) -> None:
        """Test historical schedules may contain past dates."""
        context = ContractContext(contract_amount=100_000_000, mode=ValidationMode.EDIT)
        terms = make_terms(
            ("Advance", "2024-12-01", 50_000_000),
            ("Final", "2024-12-20", 50_000_000),
        )

        result = validate_schedule(context, terms, today=TODAY)

        assert result.errors == []

    def test_outside_contract_window(self) -> None:
        """Test due dates must fall inside the contract period."""
        context = ContractContext(
            contract_amount=100_000_000,
            start_date="2025-02-01",
            end_date="2025-06-30",
            mode=ValidationMode.EDIT,
        )
        terms = make_terms(
            ("Advance", "2025-01-20", 50_000_000),
            ("Final", "2025-07-15", 50_000_000),
        )

        result = validate_schedule(context, terms, today=TODAY)

        assert result.errors == [
            "Term 1: Due date should not be before the contract start date",
            "Term 2: Due date should not be after the contract end date",
        ]

    def test_non_positive_and_small_amounts(self) -> None:
        """Test amount floors."""
        terms = make_terms(
            ("Advance", "2025-01-15", "abc"),
            ("Final", "2025-06-01", 500),
        )

        result = validate_schedule(ContractContext(contract_amount=0), terms, today=TODAY)

        assert result.errors == [
            "Term 1: Amount must be greater than 0",
            "Term 2: Amount must be at least 1,000",
        ]

    def test_small_share(self) -> None:
        """Test the share floor reports the actual share."""
        terms = make_terms(
            ("Advance", "2025-01-15", 60_000_000),
            ("Progress", "2025-04-01", 37_500_000),
            ("Final", "2025-09-01", 2_500_000),
        )

        result = validate_schedule(make_context(), terms, today=TODAY)

        assert (
            "Term 3: Payment term is too small (2.5% < 5% of the contract value)"
            in result.errors
        )

    def test_unnumbered_terms_use_position(self) -> None:
        """Test the prefix falls back to the 1-based position."""
        terms = [
            {"description": "Advance", "dueDate": "2025-01-15", "amount": 50_000_000},
            {"description": "Final", "dueDate": "bad", "amount": 50_000_000},
        ]

        result = validate_schedule(make_context(), terms, today=TODAY)

        assert result.errors == ["Term 2: Invalid date"]

    def test_custom_messages(self) -> None:
        """Test the message catalogue is used for every finding."""
        messages = ValidationMessages().customize(
            invalid_date="Ngày không hợp lệ",
            term_prefix="Đợt {term_number}: {message}",
        )
        terms = make_terms(
            ("Tạm ứng", "2025-01-15", 50_000_000),
            ("Final", "bad", 50_000_000),
        )

        result = validate_schedule(make_context(), terms, messages=messages, today=TODAY)

        assert result.errors == ["Đợt 2: Ngày không hợp lệ"]


class TestRuleChain:
    """Tests for the pluggable rule chain."""

    def test_default_rules_follow_protocol(self) -> None:
        """Test every default rule implements ScheduleRule."""
        rules = get_default_rules(RuleConfig(), MESSAGES)

        assert len(rules) == 7
        assert all(isinstance(rule, ScheduleRule) for rule in rules)

    def test_custom_chain(self) -> None:
        """Test the validator runs exactly the given rules."""
        config = RuleConfig()
        validator = ScheduleValidator(config, rules=[ReconciliationRule(config, MESSAGES)])
        terms = make_terms(("No date", "", 10))

        result = validator.validate(make_context(), terms, today=TODAY)

        assert result.errors == ["Total of payment terms is 99,999,990 less than the contract value"]

    def test_custom_rule(self) -> None:
        """Test a user-defined rule can add findings."""

        class NoWeekendRule:
            def check(self, snapshot: ScheduleSnapshot, outcome: RuleOutcome) -> None:
                for term in snapshot.terms:
                    if term.due and term.due.weekday() >= 5:
                        outcome.warn(f"Term {term.term_number} is due on a weekend")

        validator = ScheduleValidator(rules=[NoWeekendRule()])
        terms = make_terms(("Advance", "2025-03-01", 100_000_000))

        result = validator.validate(make_context(), terms, today=TODAY)

        assert isinstance(NoWeekendRule(), ScheduleRule)
        assert result.warnings == ["Term 1 is due on a weekend"]


class TestValidateSingleTerm:
    """Tests for live-edit checks of one term."""

    def test_valid_term(self) -> None:
        """Test an acceptable term."""
        errors = validate_single_term(
            "2025-03-01", 30_000_000, 1, make_context(), VALID_TERMS, today=TODAY
        )
        assert errors == []

    def test_messages_are_not_prefixed(self) -> None:
        """Test single-term errors carry no term prefix."""
        errors = validate_single_term("nope", 30_000_000, 1, make_context(), today=TODAY)
        assert errors == ["Invalid date"]

    def test_required_date(self) -> None:
        """Test an empty date is required."""
        errors = validate_single_term("", 30_000_000, 1, make_context(), today=TODAY)
        assert errors == ["Please select a due date"]

    def test_datetime_due_date(self) -> None:
        """Test a datetime is checked by its calendar date."""
        context = make_context()

        later = validate_single_term(datetime(2025, 3, 1, 9, 30), 30_000_000, 1, context, today=TODAY)
        past = validate_single_term(datetime(2024, 12, 1), 30_000_000, 1, context, today=TODAY)

        assert later == []
        assert past == [MESSAGES.term_due_date_past, MESSAGES.term_before_start_date]

    def test_first_term_advance_ceiling(self) -> None:
        """Test the advance ceiling is checked for the first position only."""
        context = make_context()

        first = validate_single_term("2025-01-15", 80_000_000, 0, context, today=TODAY)
        later = validate_single_term("2025-03-01", 80_000_000, 1, context, today=TODAY)

        assert first == ["Advance payment should not exceed 70% of the contract value"]
        assert later == []

    def test_duplicate_of_other_term(self) -> None:
        """Test a date already used by another term."""
        errors = validate_single_term(
            "2025-04-01", 30_000_000, 0, make_context(), VALID_TERMS, today=TODAY
        )
        assert errors == [MESSAGES.term_duplicate_date]

    def test_own_date_is_not_a_duplicate(self) -> None:
        """Test the edited term is skipped when looking for duplicates."""
        errors = validate_single_term(
            "2025-04-01", 40_000_000, 1, make_context(), VALID_TERMS, today=TODAY
        )
        assert errors == []

    def test_date_objects_accepted(self) -> None:
        """Test a date object can be passed directly."""
        errors = validate_single_term(date(2025, 3, 1), "30000000", 1, make_context(), today=TODAY)
        assert errors == []

    def test_small_share_and_amount(self) -> None:
        """Test amount and share floors."""
        errors = validate_single_term("2025-03-01", 800, 1, make_context(), today=TODAY)

        assert errors == [
            "Amount must be at least 1,000",
            "Payment term is too small (0% < 5% of the contract value)",
        ]


class TestValidateTermForm:
    """Tests for edit-form field checks."""

    def test_valid_form(self) -> None:
        """Test a complete form."""
        form = {"description": "Advance payment", "dueDate": "2025-01-15", "amount": "1000000"}
        assert validate_term_form(form) == []

    def test_description_rules(self) -> None:
        """Test description is required and length-bounded."""
        base = {"dueDate": "2025-01-15", "amount": 1000}

        assert validate_term_form({**base, "description": "  "}) == [
            MESSAGES.term_description_required
        ]
        assert validate_term_form({**base, "description": "ab"}) == [
            "Description must be at least 3 characters"
        ]
        assert validate_term_form({**base, "description": "x" * 101}) == [
            "Description must be at most 100 characters"
        ]

    def test_date_rules(self) -> None:
        """Test due date is required and must be valid."""
        base = {"description": "Advance", "amount": 1000}

        assert validate_term_form(base) == [MESSAGES.term_due_date_required]
        assert validate_term_form({**base, "dueDate": "2025-02-30"}) == [MESSAGES.invalid_date]

    def test_amount_rules(self) -> None:
        """Test amount is required and positive."""
        base = {"description": "Advance", "dueDate": "2025-01-15"}

        assert validate_term_form(base) == [MESSAGES.term_amount_required]
        assert validate_term_form({**base, "amount": "n/a"}) == [MESSAGES.term_amount_required]
        assert validate_term_form({**base, "amount": 0}) == [MESSAGES.term_amount_positive]

    def test_notes_length(self) -> None:
        """Test notes are length-bounded."""
        form = {
            "description": "Advance",
            "dueDate": "2025-01-15",
            "amount": 1000,
            "notes": "n" * 201,
        }
        assert validate_term_form(form) == ["Notes must be at most 200 characters"]

    def test_paid_status_needs_payment_details(self) -> None:
        """Test a paid term needs a payment date and amount."""
        form = {
            "description": "Advance",
            "dueDate": "2025-01-15",
            "amount": 1000,
            "status": "paid",
        }

        assert validate_term_form(form) == [
            MESSAGES.paid_date_required,
            MESSAGES.paid_amount_positive,
        ]
        assert validate_term_form(
            {**form, "paidDate": "2025-01-20", "paidAmount": 1000}
        ) == []
        assert validate_term_form({**form, "paidDate": "20/01/2025", "paidAmount": 1000}) == [
            MESSAGES.paid_date_invalid
        ]

    def test_custom_field_rules(self) -> None:
        """Test field limits come from the configuration."""
        config = RuleConfig(fields=FieldRules(description_min_length=10))
        form = {"description": "Advance", "dueDate": "2025-01-15", "amount": 1000}

        assert validate_term_form(form, config=config) == [
            "Description must be at least 10 characters"
        ]
