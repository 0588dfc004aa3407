"""Clinic domain logic: patients, staff, tasks and appointments, stored in memory."""

__version__ = "0.1.0"