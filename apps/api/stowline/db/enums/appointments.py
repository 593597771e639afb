"""Appointment and booking enums."""

from enum import Enum


class AppointmentType(str, Enum):
    """What the customer booked."""

    INITIAL_PICKUP = "Initial Pickup"
    ADDITIONAL_STORAGE = "Additional Storage"
    STORAGE_UNIT_ACCESS = "Storage Unit Access"
    END_STORAGE_TERM = "End Storage Term"


class AppointmentStatus(str, Enum):
    """
    Appointment lifecycle status.

    Flow: Scheduled → Confirmed → In Progress → Completed
              ↘ Pending (awaiting a moving partner)
              ↘ Canceled
    """

    SCHEDULED = "Scheduled"
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELED = "Canceled"


# Appointment types that consume empty storage units when scheduled
UNIT_RESERVING_APPOINTMENT_TYPES = (
    AppointmentType.INITIAL_PICKUP,
    AppointmentType.ADDITIONAL_STORAGE,
)

APPOINTMENT_STATUS_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.SCHEDULED: frozenset(
        {
            AppointmentStatus.PENDING,
            AppointmentStatus.CONFIRMED,
            AppointmentStatus.IN_PROGRESS,
            AppointmentStatus.CANCELED,
        }
    ),
    AppointmentStatus.PENDING: frozenset(
        {
            AppointmentStatus.SCHEDULED,
            AppointmentStatus.CONFIRMED,
            AppointmentStatus.CANCELED,
        }
    ),
    AppointmentStatus.CONFIRMED: frozenset(
        {
            AppointmentStatus.SCHEDULED,
            AppointmentStatus.IN_PROGRESS,
            AppointmentStatus.CANCELED,
        }
    ),
    AppointmentStatus.IN_PROGRESS: frozenset(
        {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELED}
    ),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELED: frozenset(),
}

DEFAULT_APPOINTMENT_STATUS = AppointmentStatus.SCHEDULED
