"""Value objects for the comparison-filter and pagination engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, TypeVar

from shared_kernel.exceptions import InvalidArgumentError

T = TypeVar("T")


class _Unset:
    """Marker for a comparison bound that was not supplied."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class RangeFilter:
    """Range predicate over an ordered field (counters, timestamps).

    When ``eq`` is supplied it fully determines the match and the other
    bounds are ignored. ``eq=None`` is meaningful: it matches records whose
    field is null (e.g. ``deleted_at`` of live records). Otherwise at most
    one lower bound (``gt``/``gte``) and at most one upper bound
    (``lt``/``lte``) combine as an AND range.

    Timestamps are stored timezone-aware, so datetime bounds must carry a
    timezone as well.

    Raises:
        InvalidArgumentError: If both gt and gte, or both lt and lte, are given,
            or if a datetime bound is naive
    """

    eq: Any = UNSET
    gt: Any = UNSET
    gte: Any = UNSET
    lt: Any = UNSET
    lte: Any = UNSET

    def __post_init__(self) -> None:
        for name in ("eq", "gt", "gte", "lt", "lte"):
            value = getattr(self, name)
            if isinstance(value, datetime) and value.tzinfo is None:
                raise InvalidArgumentError(name, f"{name} must be timezone-aware")
        if self.has_eq:
            return
        if self.gt is not UNSET and self.gte is not UNSET:
            raise InvalidArgumentError("gte", "Use either gt or gte, not both")
        if self.lt is not UNSET and self.lte is not UNSET:
            raise InvalidArgumentError("lte", "Use either lt or lte, not both")

    @property
    def has_eq(self) -> bool:
        """Whether an equality bound was supplied (possibly None)."""
        return self.eq is not UNSET

    def is_empty(self) -> bool:
        """Whether no bound at all was supplied."""
        return not self.has_eq and all(
            bound is UNSET for bound in (self.gt, self.gte, self.lt, self.lte)
        )


@dataclass(frozen=True)
class Pagination:
    """Page request: offset is applied first, then the page window.

    Defaults to ``page=1, limit=10, offset=0``. ``limit=0`` means no limit.
    """

    page: int = 1
    limit: int = 10
    offset: int = 0

    def __post_init__(self) -> None:
        for name, minimum in (("page", 1), ("limit", 0), ("offset", 0)):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidArgumentError(name, f"{name} must be an integer")
            if value < minimum:
                raise InvalidArgumentError(name, f"{name} must be >= {minimum}")

    @classmethod
    def unbounded(cls) -> Pagination:
        """Return a request covering the whole result set."""
        return cls(page=1, limit=0, offset=0)


@dataclass(frozen=True)
class PageResult(Generic[T]):
    """A page of results.

    Attributes:
        docs: Items in the requested page window
        total: Number of matching items remaining after the offset
        limit: Requested page size (0 = unlimited)
        page: Requested page number (1-based)
        pages: Number of pages available for ``total`` items
        offset: Requested offset
    """

    docs: list[T] = field(default_factory=list)
    total: int = 0
    limit: int = 10
    page: int = 1
    pages: int = 1
    offset: int = 0
