"""Appointment entities, storage, staff availability and scheduling."""