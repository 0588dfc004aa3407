"""Storage for staff members, their tasks, schedule links and lookup tables."""

from __future__ import annotations

import copy
import uuid
from datetime import datetime
from typing import Any, Dict, Generic, Iterable, List, Optional, Tuple, TypeVar

from clinicsvc.core import NIL_ID, RecordNotFoundError
from clinicsvc.staff.entity import ScheduleEntry, Staff, Task
from clinicsvc.store import InMemoryRepository

L = TypeVar("L")

DOCTOR_ROLE = "Doctor"
ACTIVE_STATUS = "Active"
STAFF_NOT_FOUND = "staff not found"
STATUS_NOT_UPDATED = "staff not found or status not changed"


class LookupRepository(Generic[L]):
    """A table of named lookup values such as roles or statuses.

    ``kind`` names the value in error messages, e.g. ``"staff role"``.
    """

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._rows: Dict[str, L] = {}

    def create(self, item: L) -> None:
        """Store ``item``; its name must not be taken yet."""
        name = getattr(item, "name")
        if name in self._rows:
            raise ValueError(f"duplicate {self.kind}: {name}")
        self._rows[name] = copy.deepcopy(item)

    def find_by_name(self, name: str) -> L:
        """Return a copy of the value with this name."""
        try:
            return copy.deepcopy(self._rows[name])
        except KeyError:
            raise RecordNotFoundError(f"{self.kind} not found") from None

    def list_all(self) -> List[L]:
        """Return copies of every stored value, in insertion order."""
        return [copy.deepcopy(row) for row in self._rows.values()]


class TaskRepository(InMemoryRepository[Task]):
    """Task store; the status relation is resolved by the reader, not stored."""

    def _copy_in(self, entity: Task) -> Task:
        stored = copy.deepcopy(entity)
        stored.status = None
        return stored


class StaffRepository(InMemoryRepository[Staff]):
    """Staff store that links staff to tasks and resolves lookup relations."""

    def __init__(
        self,
        tasks: Optional[TaskRepository] = None,
        roles: Optional[LookupRepository] = None,
        statuses: Optional[LookupRepository] = None,
        task_statuses: Optional[LookupRepository] = None,
    ) -> None:
        super().__init__()
        self.tasks = tasks if tasks is not None else TaskRepository()
        self.roles = roles if roles is not None else LookupRepository("staff role")
        self.statuses = (
            statuses if statuses is not None else LookupRepository("staff status")
        )
        self.task_statuses = (
            task_statuses if task_statuses is not None else LookupRepository("task status")
        )
        self._links: List[Tuple[uuid.UUID, uuid.UUID]] = []

    # --- helpers -------------------------------------------------------

    def _copy_in(self, entity: Staff) -> Staff:
        stored = copy.deepcopy(entity)
        stored.role = None
        stored.status = None
        stored.schedule = []
        return stored

    @staticmethod
    def _lookup(table: LookupRepository, name: str) -> Optional[Any]:
        try:
            return table.find_by_name(name)
        except RecordNotFoundError:
            return None

    def _load_task(self, task_id: uuid.UUID) -> Optional[Task]:
        try:
            task = self.tasks.find_by_id(task_id)
        except RecordNotFoundError:
            return None
        task.status = self._lookup(self.task_statuses, task.status_id)
        return task

    def _hydrate(self, staff: Staff) -> Staff:
        staff.role = self._lookup(self.roles, staff.role_id)
        staff.status = self._lookup(self.statuses, staff.status_id)
        staff.schedule = [
            ScheduleEntry(staff_id=staff_id, task_id=task_id, task=self._load_task(task_id))
            for staff_id, task_id in self._links
            if staff_id == staff.id
        ]
        return staff

    def _require_staff(self, staff_id: uuid.UUID) -> None:
        try:
            self._get_active(staff_id)
        except RecordNotFoundError:
            raise RecordNotFoundError(STAFF_NOT_FOUND) from None

    def _link(self, staff_id: uuid.UUID, task_ids: Iterable[uuid.UUID]) -> None:
        new_links = [(staff_id, task_id) for task_id in task_ids]
        for link in new_links:
            if link in self._links or new_links.count(link) > 1:
                raise ValueError(f"duplicate schedule entry for task {link[1]}")
        self._links.extend(new_links)

    # --- overrides -----------------------------------------------------

    def create(self, entity: Staff) -> None:
        """Store a new staff member and link the schedule entries it carries.

        An entry holding a task that is not stored yet has the task created.
        """
        schedule = list(entity.schedule)
        for entry in schedule:
            if entry.task_id == NIL_ID and entry.task is None:
                raise ValueError("schedule entry has no task")
        super().create(entity)
        task_ids = []
        for entry in schedule:
            task_id = entry.task_id
            if entry.task is not None and (
                task_id == NIL_ID or self._load_task(task_id) is None
            ):
                self.tasks.create(entry.task)
                task_id = entry.task.id
            task_ids.append(task_id)
        self._link(entity.id, task_ids)

    def find_by_id(self, entity_id: uuid.UUID) -> Staff:
        """Return the staff member with role, status and schedule loaded."""
        try:
            staff = super().find_by_id(entity_id)
        except RecordNotFoundError:
            raise RecordNotFoundError(STAFF_NOT_FOUND) from None
        return self._hydrate(staff)

    def delete(self, entity_id: uuid.UUID, hard_delete: bool = False) -> None:
        """Delete a staff member; a hard delete also drops its schedule links."""
        super().delete(entity_id, hard_delete)
        if hard_delete:
            self._links = [link for link in self._links if link[0] != entity_id]

    # --- staff-specific queries ----------------------------------------

    def find_available_doctors(
        self, start_time: datetime, end_time: datetime
    ) -> List[Staff]:
        """Active doctors, loaded with their relations.

        The time range is accepted but schedules are not yet checked against it.
        """
        role_names = {role.name for role in self.roles.list_all()}
        status_names = {status.name for status in self.statuses.list_all()}
        return [
            self._hydrate(self._copy_out(row))
            for row in self._active()
            if row.role_id == DOCTOR_ROLE
            and row.role_id in role_names
            and row.status_id == ACTIVE_STATUS
            and row.status_id in status_names
        ]

    def add_schedule_entries(self, staff_id: uuid.UUID, tasks: Iterable[Task]) -> None:
        """Create ``tasks`` and link each to the staff member, all or nothing."""
        tasks = list(tasks)
        if not tasks:
            return
        self._require_staff(staff_id)
        created: List[Task] = []
        try:
            for task in tasks:
                self.tasks.create(task)
                created.append(task)
            self._link(staff_id, [task.id for task in tasks])
        except Exception:
            for task in created:
                self.tasks.delete(task.id, hard_delete=True)
            raise

    def update_status(self, staff_id: uuid.UUID, status_id: str) -> None:
        """Set the status key of a staff member."""
        try:
            row = self._get_active(staff_id)
        except RecordNotFoundError:
            raise RecordNotFoundError(STATUS_NOT_UPDATED) from None
        row.status_id = status_id
        row.touch()

    def assign_task_to_staff(self, staff_id: uuid.UUID, task: Task) -> None:
        """Create ``task`` and link it to the staff member."""
        self.add_schedule_entries(staff_id, [task])

    def find_tasks_by_staff_id(self, staff_id: uuid.UUID) -> List[Task]:
        """Tasks linked to the staff member, with their status loaded."""
        loaded = (
            self._load_task(task_id)
            for linked_staff, task_id in self._links
            if linked_staff == staff_id
        )
        return [task for task in loaded if task is not None]