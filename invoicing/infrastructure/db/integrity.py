"""
Helpers for reading database integrity errors.
"""

from sqlalchemy.exc import IntegrityError


def is_unique_violation(exc: IntegrityError, constraint_name: str, column: str) -> bool:
    """
    Tell whether ``exc`` was raised by the given unique constraint.

    PostgreSQL reports the constraint name. SQLite only lists the columns,
    as ``table.column``, so ``column`` is matched in that form.
    """
    message = str(exc.orig)
    return constraint_name in message or column in message
