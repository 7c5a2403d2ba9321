"""Schedule editing operations.

Pure list operations that return a new schedule and leave validation to
the caller.
"""

from payment_schedule.editor.operations import (
    add_default_term,
    allocate_share,
    delete_term,
    edit_term,
    move_term,
    renumber_terms,
)

__all__ = [
    "add_default_term",
    "allocate_share",
    "edit_term",
    "delete_term",
    "move_term",
    "renumber_terms",
]
