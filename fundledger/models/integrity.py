"""Referential integrity guard.

One mechanism for every parent/dependent pair: the parent supplies a list
of DependentLookup entries, and the guard counts dependents through them
before a delete is allowed. Callers run it inside Database.transaction()
so the count and the delete see the same snapshot.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any, NamedTuple

from fundledger.models.errors import IntegrityViolationError

logger = logging.getLogger(__name__)


class DependentLookup(NamedTuple):
    """A dependent kind and how to list its rows for a parent.

    Attributes:
        kind: Singular noun used in messages (e.g. "portfolio")
        find: Callable (conn, parent_id) -> sequence of dependent rows
    """

    kind: str
    find: Callable[[Any, Any], Sequence]


def pluralize(count: int, noun: str) -> str:
    """Return "1 associated portfolio" / "2 associated portfolios"."""
    suffix = "" if count == 1 else "s"
    return f"{count} associated {noun}{suffix}"


def count_dependents(
    conn, parent_id: Any, lookups: Sequence[DependentLookup]
) -> dict[str, int]:
    """Count dependent rows per kind for a parent.

    Returns:
        Mapping of kind to count, including zero counts
    """
    counts: dict[str, int] = {}
    for lookup in lookups:
        counts[lookup.kind] = counts.get(lookup.kind, 0) + len(
            lookup.find(conn, parent_id)
        )
    return counts


def ensure_no_dependents(
    conn, parent_kind: str, parent_id: Any, lookups: Sequence[DependentLookup]
) -> None:
    """Raise if the parent still has dependents.

    Args:
        conn: Open connection, inside the delete's transaction
        parent_kind: Entity name of the parent (e.g. "investor")
        parent_id: Primary key of the parent
        lookups: Dependent lookups to consult

    Raises:
        IntegrityViolationError: If any lookup returns rows
    """
    if not lookups:
        return

    counts = count_dependents(conn, parent_id, lookups)
    blocking = {kind: n for kind, n in counts.items() if n > 0}
    if not blocking:
        return

    described = " and ".join(pluralize(n, kind) for kind, n in blocking.items())
    message = (
        f"Cannot delete {parent_kind} with ID {parent_id}: "
        f"{parent_kind} has {described}"
    )
    logger.warning(message)
    raise IntegrityViolationError(
        message,
        parent_kind=parent_kind,
        parent_id=parent_id,
        dependent_counts=blocking,
    )
