"""Staff members, their tasks, schedule links and lookup values."""

from __future__ import annotations

import dataclasses
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, List, Optional

from clinicsvc.core import NIL_ID, BaseEntity


@dataclass
class StaffRole:
    """A role a staff member can hold, keyed by name."""

    table_name: ClassVar[str] = "staff_roles"

    name: str
    description: str = ""


@dataclass
class StaffStatus:
    """An employment status, keyed by name."""

    table_name: ClassVar[str] = "staff_statuses"

    name: str
    description: str = ""


@dataclass
class TaskStatus:
    """A task status, keyed by name."""

    table_name: ClassVar[str] = "task_statuses"

    name: str
    description: str = ""


@dataclass(kw_only=True)
class Task(BaseEntity):
    """A task placed in a staff member's schedule."""

    table_name: ClassVar[str] = "staff_tasks"

    title: str = ""
    description: str = ""
    priority: int = 0
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    status_id: str = ""
    status: Optional[TaskStatus] = None


@dataclass(kw_only=True)
class ScheduleEntry:
    """Link between a staff member and a task."""

    table_name: ClassVar[str] = "staff_schedule_entries"

    staff_id: uuid.UUID = NIL_ID
    task_id: uuid.UUID = NIL_ID
    task: Optional[Task] = None


@dataclass(kw_only=True)
class Staff(BaseEntity):
    """A hospital staff member."""

    table_name: ClassVar[str] = "staff"

    first_name: str = ""
    last_name: str = ""
    date_of_birth: Optional[datetime] = None
    phone_number: str = ""
    address: str = ""
    role_id: str = ""
    role: Optional[StaffRole] = None
    status_id: str = ""
    status: Optional[StaffStatus] = None
    specialization: str = ""
    nurse_type: str = ""
    schedule: List[ScheduleEntry] = field(default_factory=list)

    def update_details(
        self,
        first_name: str = "",
        last_name: str = "",
        phone_number: str = "",
        address: str = "",
        date_of_birth: Optional[datetime] = None,
        specialization: str = "",
        nurse_type: str = "",
    ) -> None:
        """Overwrite the fields given; empty strings and ``None`` are skipped."""
        changed = False
        for name, value in (
            ("first_name", first_name),
            ("last_name", last_name),
            ("phone_number", phone_number),
            ("address", address),
        ):
            if value and getattr(self, name) != value:
                setattr(self, name, value)
                changed = True
        if date_of_birth is not None and self.date_of_birth != date_of_birth:
            self.date_of_birth = date_of_birth
            changed = True
        for name, value in (("specialization", specialization), ("nurse_type", nurse_type)):
            if value and getattr(self, name) != value:
                setattr(self, name, value)
                changed = True
        if changed:
            self.touch()

    def set_status(self, status_id: str) -> None:
        """Set the status key, touching the record only when it changes."""
        if self.status_id != status_id:
            self.status_id = status_id
            self.touch()

    def add_schedule_entry(self, entry: ScheduleEntry) -> None:
        """Append a copy of ``entry``, linking it to this staff member if unlinked."""
        link = dataclasses.replace(entry)
        if link.staff_id == NIL_ID:
            link.staff_id = self.id
        self.schedule.append(link)