"""Use cases for the staff lookup tables: roles, staff statuses and task statuses."""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from clinicsvc.core import ErrorType, UseCaseError
from clinicsvc.staff.entity import StaffRole, StaffStatus, TaskStatus
from clinicsvc.staff.repository import LookupRepository


class LookupUseCase:
    """Adds and lists the named values staff and tasks refer to."""

    def __init__(
        self,
        staff_roles: LookupRepository,
        staff_statuses: LookupRepository,
        task_statuses: LookupRepository,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.staff_roles = staff_roles
        self.staff_statuses = staff_statuses
        self.task_statuses = task_statuses
        self.logger = logger or logging.getLogger(__name__)

    def _add(
        self,
        repo: LookupRepository,
        factory: Callable[..., Any],
        name: str,
        description: str,
        label: str,
        empty_message: str,
    ) -> Any:
        self.logger.info("Adding %s name=%s", label, name)
        if not name:
            raise UseCaseError(ErrorType.INVALID_INPUT, empty_message)
        item = factory(name=name, description=description)
        try:
            repo.create(item)
        except Exception as exc:
            self.logger.error("Failed to add %s name=%s: %s", label, name, exc)
            raise UseCaseError(ErrorType.INTERNAL, f"failed to add {label}") from exc
        return item

    def _list(self, repo: LookupRepository, plural: str) -> List[Any]:
        self.logger.info("Listing %s", plural)
        try:
            return repo.list_all()
        except Exception as exc:
            self.logger.error("Failed to list %s: %s", plural, exc)
            raise UseCaseError(ErrorType.INTERNAL, f"failed to list {plural}") from exc

    def add_staff_role(self, name: str, description: str = "") -> StaffRole:
        """Create a staff role."""
        return self._add(
            self.staff_roles, StaffRole, name, description,
            "staff role", "role name cannot be empty",
        )

    def list_staff_roles(self) -> List[StaffRole]:
        """Return every staff role."""
        return self._list(self.staff_roles, "staff roles")

    def add_staff_status(self, name: str, description: str = "") -> StaffStatus:
        """Create a staff status."""
        return self._add(
            self.staff_statuses, StaffStatus, name, description,
            "staff status", "status name cannot be empty",
        )

    def list_staff_statuses(self) -> List[StaffStatus]:
        """Return every staff status."""
        return self._list(self.staff_statuses, "staff statuses")

    def add_task_status(self, name: str, description: str = "") -> TaskStatus:
        """Create a task status."""
        return self._add(
            self.task_statuses, TaskStatus, name, description,
            "task status", "task status name cannot be empty",
        )

    def list_task_statuses(self) -> List[TaskStatus]:
        """Return every task status."""
        return self._list(self.task_statuses, "task statuses")