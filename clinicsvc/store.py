"""A generic in-memory repository with filtering, sorting and pagination."""

from __future__ import annotations

import copy
import dataclasses
import math
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Iterator, List, Mapping, Optional, TypeVar

from clinicsvc.core import NIL_ID, BaseEntity, RecordNotFoundError, utcnow

E = TypeVar("E", bound=BaseEntity)

NOT_FOUND_MESSAGE = "entity not found"


@dataclass
class FilterOptions:
    """Paging and ordering for list queries.

    ``page`` counts from 1. A ``page_size`` of ``None`` returns every match.
    """

    page: int = 1
    page_size: Optional[int] = None
    sort_by: Optional[str] = None
    sort_desc: bool = False
    include_deleted: bool = False

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be at least 1")
        if self.page_size is not None and self.page_size < 1:
            raise ValueError("page_size must be at least 1")


@dataclass
class PaginationResult(Generic[E]):
    """One page of a list query and the size of the whole result."""

    items: List[E] = field(default_factory=list)
    total_items: int = 0
    page: int = 1
    page_size: Optional[int] = None

    @property
    def total_pages(self) -> int:
        """Number of pages the whole result spans."""
        if self.total_items == 0:
            return 0
        if self.page_size is None:
            return 1
        return math.ceil(self.total_items / self.page_size)


class InMemoryRepository(Generic[E]):
    """Stores copies of entities keyed by id.

    Entities handed in are copied on the way in and on the way out, so the
    caller never shares state with the store. Deletion is soft by default.
    """

    def __init__(self) -> None:
        self._rows: Dict[uuid.UUID, E] = {}

    # --- storage hooks -------------------------------------------------

    def _copy_in(self, entity: E) -> E:
        return copy.deepcopy(entity)

    def _copy_out(self, entity: E) -> E:
        return copy.deepcopy(entity)

    def _active(self, include_deleted: bool = False) -> Iterator[E]:
        for row in self._rows.values():
            if include_deleted or row.deleted_at is None:
                yield row

    def _get_active(self, entity_id: uuid.UUID) -> E:
        row = self._rows.get(entity_id)
        if row is None or row.deleted_at is not None:
            raise RecordNotFoundError(NOT_FOUND_MESSAGE)
        return row

    @staticmethod
    def _check_field(entity: Any, name: str) -> None:
        names = {f.name for f in dataclasses.fields(entity)}
        if name not in names:
            raise ValueError(f"unknown field: {name}")

    def _matches(self, entity: E, filters: Mapping[str, Any]) -> bool:
        for name, value in filters.items():
            self._check_field(entity, name)
            if getattr(entity, name) != value:
                return False
        return True

    # --- public API ----------------------------------------------------

    def create(self, entity: E) -> None:
        """Store a new entity, assigning its id and timestamps when unset."""
        if entity.id == NIL_ID:
            entity.id = uuid.uuid4()
        elif entity.id in self._rows:
            raise ValueError(f"duplicate id: {entity.id}")
        now = utcnow()
        if entity.created_at is None:
            entity.created_at = now
        if entity.updated_at is None:
            entity.updated_at = now
        self._rows[entity.id] = self._copy_in(entity)

    def find_by_id(self, entity_id: uuid.UUID) -> E:
        """Return a copy of the live entity with this id."""
        return self._copy_out(self._get_active(entity_id))

    def update(self, entity: E) -> None:
        """Replace a stored entity with ``entity`` and refresh its timestamp."""
        stored = self._get_active(entity.id)
        if entity.created_at is None:
            entity.created_at = stored.created_at
        entity.touch()
        self._rows[entity.id] = self._copy_in(entity)

    def delete(self, entity_id: uuid.UUID, hard_delete: bool = False) -> None:
        """Remove an entity, or only mark it deleted unless ``hard_delete``."""
        row = self._get_active(entity_id)
        if hard_delete:
            del self._rows[entity_id]
        else:
            row.deleted_at = utcnow()

    def find_all(self, options: Optional[FilterOptions] = None) -> PaginationResult[E]:
        """Return one page of all entities."""
        return self.find_with_filter({}, options)

    def find_with_filter(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        options: Optional[FilterOptions] = None,
    ) -> PaginationResult[E]:
        """Return one page of entities whose fields equal the given values."""
        filters = dict(filters or {})
        options = options or FilterOptions()
        matches = [
            row
            for row in self._active(options.include_deleted)
            if self._matches(row, filters)
        ]
        if options.sort_by is not None:
            for row in matches:
                self._check_field(row, options.sort_by)
            key_name = options.sort_by

            def sort_key(row: E) -> tuple:
                value = getattr(row, key_name)
                return (value is None, value)

            matches.sort(key=sort_key, reverse=options.sort_desc)

        if options.page_size is None:
            page_rows = matches if options.page == 1 else []
        else:
            start = (options.page - 1) * options.page_size
            page_rows = matches[start : start + options.page_size]

        return PaginationResult(
            items=[self._copy_out(row) for row in page_rows],
            total_items=len(matches),
            page=options.page,
            page_size=options.page_size,
        )

    def count(self, filters: Optional[Mapping[str, Any]] = None) -> int:
        """Count live entities whose fields equal the given values."""
        filters = dict(filters or {})
        return sum(1 for row in self._active() if self._matches(row, filters))