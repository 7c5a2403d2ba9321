"""Payment status lifecycle: transitions, bulk status import and summaries."""

from payment_schedule.lifecycle.status import (
    apply_status_updates,
    load_status_rows,
    summarize_payments,
    transition_status,
)

__all__ = [
    "transition_status",
    "apply_status_updates",
    "load_status_rows",
    "summarize_payments",
]
