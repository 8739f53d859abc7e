# core/scope.py

"""
Scope filter: the single enforcement point for data isolation between
panchayaths. Every read of agents, panchayaths, notes, tasks and
registration requests passes through `filter_by_scope` before it reaches a
response or an aggregation step.
"""

from typing import Callable, Iterable, List, Optional, TypeVar, Union

from core.errors import ScopeViolation
from core.logging_config import security_logger
from models.principal import Principal

T = TypeVar("T")

ScopeKey = Union[str, Callable[[T], Optional[str]]]


def _extractor(key: ScopeKey) -> Callable[[T], Optional[str]]:
    if callable(key):
        return key

    def by_name(row):
        if isinstance(row, dict):
            return row.get(key)
        return getattr(row, key, None)

    return by_name


def filter_by_scope(principal: Principal, rows: Iterable[T], key: ScopeKey = "panchayath_id") -> List[T]:
    """
    Narrow `rows` to the principal's scope.

    Unrestricted principals get every row back; a panchayath-scoped principal
    gets rows whose key matches; a principal with no scope gets nothing.
    """
    rows = list(rows)
    scope = principal.scope

    if scope.unrestricted:
        return rows

    if scope.panchayath_id is None:
        return []

    extract = _extractor(key)
    return [row for row in rows if extract(row) == scope.panchayath_id]


def scope_query(principal: Principal, query, column: str = "panchayath_id"):
    """
    Push the scope rule into a PostgREST query builder.

    Only narrows the fetch; results are still passed through
    `filter_by_scope`. Returns None when the principal can see nothing,
    so callers can skip the round trip.
    """
    scope = principal.scope

    if scope.unrestricted:
        return query

    if scope.panchayath_id is None:
        return None

    return query.eq(column, scope.panchayath_id)


def ensure_in_scope(principal: Principal, panchayath_id: Optional[str], action: str = "access"):
    """
    Defensive check before a mutation. Normal flows never trip it, so a
    violation is logged on the security logger as a programming error.
    """
    if principal.scope.covers(panchayath_id):
        return

    security_logger.error(
        f"Scope violation: {principal.cache_key} attempted to {action} "
        f"panchayath {panchayath_id!r} outside scope "
        f"{principal.scope.panchayath_id!r}"
    )
    raise ScopeViolation(f"Not permitted to {action} outside your panchayath")
