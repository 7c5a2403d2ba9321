"""Example: Basic usage of payment-schedule."""

from datetime import date
from decimal import Decimal

from payment_schedule import (
    AttachmentPolicy,
    BuiltinProfiles,
    ContractContext,
    RuleConfig,
    RuleProfile,
    ValidationReporter,
    add_default_term,
    delete_term,
    edit_term,
    summarize_payments,
    transition_status,
    validate_schedule,
)

CONTRACT = ContractContext(
    contract_amount=100_000_000,
    start_date="2025-01-01",
    end_date="2025-12-31",
)

TERMS = [
    {"termNumber": 1, "description": "Advance payment", "dueDate": "2025-01-15", "amount": 30_000_000},
    {"termNumber": 2, "description": "Delivery", "dueDate": "2025-04-01", "amount": 40_000_000},
    {"termNumber": 3, "description": "Acceptance", "dueDate": "2025-04-05", "amount": 20_000_000},
]


def example_validate_schedule() -> None:
    """Validate a schedule and print the findings."""
    print("=" * 60)
    print("Example 1: Validating a Schedule")
    print("=" * 60)

    result = validate_schedule(CONTRACT, TERMS, today=date(2025, 1, 1))

    print(f"Valid: {result.is_valid}")
    print(f"Scheduled total: {result.total_amount:,}")
    for error in result.errors:
        print(f"  ✗ {error}")
    for warning in result.warnings:
        print(f"  ! {warning}")


def example_edit_and_report() -> None:
    """Fix the schedule with editor operations and write a report."""
    print("\n" + "=" * 60)
    print("Example 2: Editing and Reporting")
    print("=" * 60)

    terms = edit_term(TERMS, 2, {"dueDate": "2025-09-01"}, CONTRACT.contract_amount)
    terms = add_default_term(terms, CONTRACT.contract_amount, CONTRACT.start_date)
    print(f"Added: {terms[-1].description} due {terms[-1].due_date} ({terms[-1].amount:,})")

    result = validate_schedule(CONTRACT, terms, today=date(2025, 1, 1))
    reporter = ValidationReporter(result, context=CONTRACT, terms=terms)
    print(reporter.to_text())

    reporter.save("reports/schedule_review.md")
    print("\nReport saved to reports/schedule_review.md")


def example_profiles() -> None:
    """Validate with a stricter profile and a tenant override."""
    print("\n" + "=" * 60)
    print("Example 3: Rule Profiles")
    print("=" * 60)

    registry = BuiltinProfiles.create_registry()
    registry.register(
        RuleProfile(
            name="tenant_a",
            parent_profile="strict",
            rules=RuleConfig(
                min_due_date_gap_days=21,
                attachments=AttachmentPolicy(require_contract_file=True),
            ),
            message_overrides={"first_term_not_advance": "Đợt đầu tiên nên là tạm ứng"},
        )
    )

    profile = registry.get_or_raise("tenant_a")
    result = validate_schedule(
        CONTRACT,
        TERMS,
        config=profile.rules,
        messages=profile.messages(),
        today=date(2025, 1, 1),
    )
    print(f"Profile '{profile.name}': {len(result.errors)} errors, {len(result.warnings)} warnings")
    for message in [*result.errors, *result.warnings]:
        print(f"  - {message}")

    contract_file = [{"termNumber": 1, "documentType": "contract"}]
    refused = delete_term(contract_file, 0, config=profile.rules, messages=profile.messages())
    print(f"Delete last contract document refused: {refused.refused} ({refused.error})")


def example_collection() -> None:
    """Record payments and summarize collection progress."""
    print("\n" + "=" * 60)
    print("Example 4: Payment Status")
    print("=" * 60)

    first = transition_status(
        TERMS[0],
        "paid",
        paid_date="2025-01-20",
        paid_amount=Decimal("30000000"),
    )
    rejected = transition_status(TERMS[1], "paid")
    print(f"Term 1 paid: {first.accepted}")
    print(f"Term 2 rejected: {rejected.errors}")

    summary = summarize_payments([first.term, *TERMS[1:]])
    print(f"Collected {summary.paid_total:,} of {summary.scheduled_total:,}")
    print(f"Remaining: {summary.remaining:,}")


if __name__ == "__main__":
    example_validate_schedule()
    example_edit_and_report()
    example_profiles()
    example_collection()
