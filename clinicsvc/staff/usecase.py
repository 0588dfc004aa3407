"""Staff management: members, schedules, tasks, status and doctor availability."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from clinicsvc.appointment.staff_client import AvailableTimeSlot
from clinicsvc.core import NIL_ID, ErrorType, RecordNotFoundError, UseCaseError
from clinicsvc.staff.entity import Staff, Task
from clinicsvc.staff.repository import LookupRepository, StaffRepository, TaskRepository
from clinicsvc.store import FilterOptions


@dataclass(kw_only=True)
class TaskInput:
    """Data for a task to place in a staff member's schedule."""

    title: str = ""
    description: str = ""
    priority: int = 0
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    status_id: str = ""


def _invalid_range(start_time: Optional[datetime], end_time: Optional[datetime]) -> bool:
    return start_time is None or end_time is None or end_time < start_time


class StaffUseCase:
    """Operations on staff members and their work, raising UseCaseError on failure."""

    def __init__(
        self,
        staff_repository: StaffRepository,
        task_repository: Optional[TaskRepository] = None,
        staff_roles: Optional[LookupRepository] = None,
        staff_statuses: Optional[LookupRepository] = None,
        task_statuses: Optional[LookupRepository] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.staff_repository = staff_repository
        self.task_repository = (
            task_repository if task_repository is not None else staff_repository.tasks
        )
        self.staff_roles = staff_roles if staff_roles is not None else staff_repository.roles
        self.staff_statuses = (
            staff_statuses if staff_statuses is not None else staff_repository.statuses
        )
        self.task_statuses = (
            task_statuses if task_statuses is not None else staff_repository.task_statuses
        )
        self.logger = logger or logging.getLogger(__name__)

    # --- helpers -------------------------------------------------------

    @staticmethod
    def _require_staff_id(staff_id: uuid.UUID) -> None:
        if staff_id == NIL_ID:
            raise UseCaseError(ErrorType.INVALID_INPUT, "invalid staff ID")

    @staticmethod
    def _exists(table: LookupRepository, name: str) -> bool:
        try:
            table.find_by_name(name)
        except Exception:
            return False
        return True

    def _load(self, staff_id: uuid.UUID, failure_message: str) -> Staff:
        try:
            return self.staff_repository.find_by_id(staff_id)
        except RecordNotFoundError as exc:
            self.logger.warning("Staff not found staffID=%s", staff_id)
            raise UseCaseError(ErrorType.NOT_FOUND, "staff not found") from exc
        except Exception as exc:
            self.logger.error("Failed to load staff staffID=%s: %s", staff_id, exc)
            raise UseCaseError(ErrorType.INTERNAL, failure_message) from exc

    # --- staff management ----------------------------------------------

    def add_staff(
        self,
        first_name: str,
        last_name: str,
        date_of_birth: Optional[datetime],
        phone_number: str,
        address: str,
        role_id: str,
        status_id: str,
        specialization: str = "",
        nurse_type: str = "",
    ) -> Staff:
        """Create a staff member and return it with its relations loaded."""
        self.logger.info(
            "Adding new staff firstName=%s lastName=%s roleID=%s statusID=%s",
            first_name, last_name, role_id, status_id,
        )
        if (
            not first_name
            or not last_name
            or not phone_number
            or not role_id
            or not status_id
            or date_of_birth is None
        ):
            raise UseCaseError(ErrorType.INVALID_INPUT, "missing required staff information")
        if not self._exists(self.staff_roles, role_id):
            self.logger.warning("Invalid role ID roleID=%s", role_id)
            raise UseCaseError(ErrorType.INVALID_INPUT, f"invalid role ID: {role_id}")
        if not self._exists(self.staff_statuses, status_id):
            self.logger.warning("Invalid status ID statusID=%s", status_id)
            raise UseCaseError(ErrorType.INVALID_INPUT, f"invalid status ID: {status_id}")

        staff = Staff(
            first_name=first_name,
            last_name=last_name,
            date_of_birth=date_of_birth,
            phone_number=phone_number,
            address=address,
            role_id=role_id,
            status_id=status_id,
            specialization=specialization,
            nurse_type=nurse_type,
        )
        try:
            self.staff_repository.create(staff)
        except Exception as exc:
            self.logger.error("Failed to save staff: %s", exc)
            raise UseCaseError(ErrorType.INTERNAL, "failed to add staff member") from exc
        self.logger.info("Staff added successfully staffID=%s", staff.id)
        return self.staff_repository.find_by_id(staff.id)

    def get_staff_details(self, staff_id: uuid.UUID) -> Staff:
        """Return the staff member with role, status and schedule."""
        self.logger.info("Getting staff details staffID=%s", staff_id)
        self._require_staff_id(staff_id)
        return self._load(staff_id, "failed to get staff details")

    def update_staff_details(
        self,
        staff_id: uuid.UUID,
        first_name: str = "",
        last_name: str = "",
        date_of_birth: Optional[datetime] = None,
        phone_number: str = "",
        address: str = "",
        specialization: str = "",
        nurse_type: str = "",
    ) -> Staff:
        """Apply the non-empty fields to the staff member and store it."""
        self.logger.info("Updating staff details staffID=%s", staff_id)
        self._require_staff_id(staff_id)
        staff = self._load(staff_id, "failed to find staff for update")
        staff.update_details(
            first_name=first_name,
            last_name=last_name,
            phone_number=phone_number,
            address=address,
            date_of_birth=date_of_birth,
            specialization=specialization,
            nurse_type=nurse_type,
        )
        try:
            self.staff_repository.update(staff)
        except Exception as exc:
            self.logger.error("Failed to update staff staffID=%s: %s", staff_id, exc)
            raise UseCaseError(ErrorType.INTERNAL, "failed to update staff details") from exc
        self.logger.info("Staff details updated successfully staffID=%s", staff_id)
        return self.staff_repository.find_by_id(staff_id)

    def update_staff_schedule(self, staff_id: uuid.UUID, tasks: Iterable[TaskInput]) -> None:
        """Create the given tasks and add them to the staff member's schedule."""
        tasks = list(tasks)
        self.logger.info(
            "Updating staff schedule staffID=%s taskCount=%d", staff_id, len(tasks)
        )
        self._require_staff_id(staff_id)

        entities: List[Task] = []
        for item in tasks:
            if (
                item.start_time is None
                or item.end_time is None
                or item.start_time > item.end_time
                or not item.status_id
            ):
                self.logger.warning(
                    "Invalid task data staffID=%s taskTitle=%s", staff_id, item.title
                )
                raise UseCaseError(
                    ErrorType.INVALID_INPUT,
                    f"invalid data for task '{item.title}' (time range or status ID)",
                )
            if not self._exists(self.task_statuses, item.status_id):
                raise UseCaseError(
                    ErrorType.INVALID_INPUT,
                    f"invalid status ID '{item.status_id}' for task '{item.title}'",
                )
            entities.append(
                Task(
                    title=item.title,
                    description=item.description,
                    priority=int(item.priority),
                    start_time=item.start_time,
                    end_time=item.end_time,
                    status_id=item.status_id,
                )
            )

        try:
            self.staff_repository.add_schedule_entries(staff_id, entities)
        except Exception as exc:
            self.logger.error("Failed to add schedule entries staffID=%s: %s", staff_id, exc)
            raise UseCaseError(ErrorType.INTERNAL, "failed to update staff schedule") from exc
        self.logger.info("Staff schedule updated successfully staffID=%s", staff_id)

    def set_staff_status(self, staff_id: uuid.UUID, status_id: str) -> None:
        """Change the staff member's status to a known status."""
        self.logger.info("Setting staff status staffID=%s statusID=%s", staff_id, status_id)
        if staff_id == NIL_ID or not status_id:
            raise UseCaseError(ErrorType.INVALID_INPUT, "invalid staff ID or status ID")
        if not self._exists(self.staff_statuses, status_id):
            raise UseCaseError(ErrorType.INVALID_INPUT, f"invalid status ID: {status_id}")
        try:
            self.staff_repository.update_status(staff_id, status_id)
        except RecordNotFoundError as exc:
            raise UseCaseError(ErrorType.NOT_FOUND, "staff not found") from exc
        except Exception as exc:
            self.logger.error("Failed to set staff status staffID=%s: %s", staff_id, exc)
            raise UseCaseError(ErrorType.INTERNAL, "failed to set staff status") from exc
        self.logger.info("Staff status set successfully staffID=%s", staff_id)

    def get_doctor_availability(
        self,
        doctor_id: Optional[uuid.UUID],
        start_time: datetime,
        end_time: datetime,
    ) -> List[AvailableTimeSlot]:
        """Available slots in the window; ``None`` as doctor considers every doctor.

        Schedules are not yet examined: when an active doctor matches, the
        whole window is returned as one slot.
        """
        self.logger.info(
            "Getting doctor availability doctorID=%s start=%s end=%s",
            doctor_id, start_time, end_time,
        )
        if doctor_id is not None and doctor_id == NIL_ID:
            raise UseCaseError(ErrorType.INVALID_INPUT, "invalid doctor ID provided")
        if _invalid_range(start_time, end_time):
            raise UseCaseError(ErrorType.INVALID_INPUT, "invalid time range")

        try:
            doctors = self.staff_repository.find_available_doctors(start_time, end_time)
        except Exception as exc:
            self.logger.error("Failed to find active doctors: %s", exc)
            raise UseCaseError(
                ErrorType.INTERNAL, "failed to retrieve potential doctor availability"
            ) from exc

        if doctor_id is not None:
            doctors = [doctor for doctor in doctors if doctor.id == doctor_id][:1]

        if not doctors:
            return []
        return [AvailableTimeSlot(start_time=start_time, end_time=end_time)]

    def assign_task(
        self,
        staff_id: uuid.UUID,
        title: str,
        description: str,
        priority: int,
        start_time: Optional[datetime],
        end_time: Optional[datetime],
        status_id: str,
    ) -> Task:
        """Create a task for the staff member and return it with its status."""
        self.logger.info("Assigning task staffID=%s title=%s", staff_id, title)
        if (
            staff_id == NIL_ID
            or not title
            or not status_id
            or start_time is None
            or end_time is None
            or start_time > end_time
        ):
            raise UseCaseError(ErrorType.INVALID_INPUT, "invalid input for assigning task")
        try:
            self.staff_repository.find_by_id(staff_id)
        except Exception as exc:
            raise UseCaseError(
                ErrorType.INVALID_INPUT, f"invalid staff ID: {staff_id}"
            ) from exc
        if not self._exists(self.task_statuses, status_id):
            raise UseCaseError(
                ErrorType.INVALID_INPUT, f"invalid task status ID: {status_id}"
            )

        task = Task(
            title=title,
            description=description,
            priority=int(priority),
            start_time=start_time,
            end_time=end_time,
            status_id=status_id,
        )
        try:
            self.staff_repository.assign_task_to_staff(staff_id, task)
        except Exception as exc:
            self.logger.error("Failed to assign task staffID=%s: %s", staff_id, exc)
            raise UseCaseError(ErrorType.INTERNAL, "failed to assign task") from exc

        self.logger.info("Task assigned successfully staffID=%s taskID=%s", staff_id, task.id)
        try:
            task.status = self.task_statuses.find_by_name(task.status_id)
        except Exception as exc:
            self.logger.error("Failed to find task status statusID=%s: %s", status_id, exc)
        return task

    def track_workload(self, staff_id: uuid.UUID) -> List[Task]:
        """Return the tasks in the staff member's schedule."""
        self.logger.info("Tracking workload staffID=%s", staff_id)
        self._require_staff_id(staff_id)
        try:
            return self.staff_repository.find_tasks_by_staff_id(staff_id)
        except Exception as exc:
            self.logger.error("Failed to track workload staffID=%s: %s", staff_id, exc)
            raise UseCaseError(ErrorType.INTERNAL, "failed to track workload") from exc

    def list_staff(self, role_id: str = "", status_id: str = "") -> List[Staff]:
        """Return staff members, filtered by role and status when given."""
        filters: Dict[str, Any] = {}
        if role_id:
            filters["role_id"] = role_id
        if status_id:
            filters["status_id"] = status_id
        self.logger.info("Listing staff filters=%s", filters)
        try:
            result = self.staff_repository.find_with_filter(filters, FilterOptions())
        except Exception as exc:
            self.logger.error("Failed to list staff: %s", exc)
            raise UseCaseError(ErrorType.INTERNAL, "failed to retrieve staff list") from exc
        if result is None or result.items is None:
            return []
        return list(result.items)

    def list_tasks(self, status_id: str = "") -> List[Task]:
        """Return tasks, newest first, filtered by status when given."""
        filters: Dict[str, Any] = {}
        if status_id:
            filters["status_id"] = status_id
        self.logger.info("Listing tasks filters=%s", filters)
        options = FilterOptions(sort_by="created_at", sort_desc=True)
        try:
            result = self.task_repository.find_with_filter(filters, options)
        except Exception as exc:
            self.logger.error("Failed to list tasks: %s", exc)
            raise UseCaseError(ErrorType.INTERNAL, "failed to retrieve task list") from exc
        if result is None or result.items is None:
            return []
        return list(result.items)