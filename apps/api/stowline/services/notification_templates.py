"""In-app notification templates, one per NotificationType."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from stowline.db.enums import NotificationType, RecipientType

Data = dict[str, Any]


@dataclass(frozen=True)
class NotificationTemplate:
    type: NotificationType
    recipient_types: tuple[RecipientType, ...]
    required_variables: tuple[str, ...]
    get_title: Callable[[Data], str]
    get_message: Callable[[Data], str]
    supports_grouping: bool = False
    get_group_key: Callable[[Data], str] | None = None

    def missing_variables(self, data: Data) -> list[str]:
        return [name for name in self.required_variables if data.get(name) is None]

    def group_key(self, data: Data) -> str | None:
        if not self.supports_grouping or self.get_group_key is None:
            return None
        return self.get_group_key(data)


def _money(value: Any) -> str:
    return f"${float(value):,.2f}"


_TEMPLATES: tuple[NotificationTemplate, ...] = (
    # Appointments
    NotificationTemplate(
        type=NotificationType.APPOINTMENT_CONFIRMED,
        recipient_types=(RecipientType.USER,),
        required_variables=("appointment_type", "date"),
        get_title=lambda d: "Appointment confirmed",
        get_message=lambda d: f"Your {d['appointment_type']} on {d['date']} is confirmed.",
    ),
    NotificationTemplate(
        type=NotificationType.APPOINTMENT_UPDATED,
        recipient_types=(RecipientType.USER, RecipientType.DRIVER, RecipientType.MOVER),
        required_variables=("appointment_type", "status"),
        get_title=lambda d: "Appointment updated",
        get_message=lambda d: f"Your {d['appointment_type']} is now {d['status']}.",
    ),
    NotificationTemplate(
        type=NotificationType.APPOINTMENT_CANCELLED,
        recipient_types=(RecipientType.USER, RecipientType.DRIVER, RecipientType.MOVER),
        required_variables=("appointment_type", "date"),
        get_title=lambda d: "Appointment canceled",
        get_message=lambda d: (
            f"The {d['appointment_type']} on {d['date']} was canceled."
            + (f" A cancellation fee of {_money(d['cancellation_fee'])} applies." if d.get("cancellation_fee") else "")
        ),
    ),
    # Jobs
    NotificationTemplate(
        type=NotificationType.JOB_OFFER_RECEIVED,
        recipient_types=(RecipientType.DRIVER, RecipientType.MOVER),
        required_variables=("job_code", "date"),
        get_title=lambda d: "New job offer",
        get_message=lambda d: f"You have a new job offer ({d['job_code']}) for {d['date']}.",
    ),
    NotificationTemplate(
        type=NotificationType.JOB_ASSIGNED,
        recipient_types=(RecipientType.DRIVER, RecipientType.MOVER),
        required_variables=("job_code",),
        get_title=lambda d: "Job assigned",
        get_message=lambda d: f"Job {d['job_code']} has been assigned to you.",
    ),
    NotificationTemplate(
        type=NotificationType.JOB_CANCELLED,
        recipient_types=(RecipientType.DRIVER, RecipientType.MOVER),
        required_variables=("job_code",),
        get_title=lambda d: "Job canceled",
        get_message=lambda d: f"Job {d['job_code']} was canceled.",
    ),
    NotificationTemplate(
        type=NotificationType.NEW_JOB_AVAILABLE,
        recipient_types=(RecipientType.DRIVER, RecipientType.MOVER),
        required_variables=("count",),
        get_title=lambda d: "New jobs available",
        get_message=lambda d: (
            "A new job is available near you."
            if int(d["count"]) == 1
            else f"{d['count']} new jobs are available near you."
        ),
        supports_grouping=True,
        get_group_key=lambda d: "new_jobs",
    ),
    # Payments
    NotificationTemplate(
        type=NotificationType.PAYMENT_FAILED,
        recipient_types=(RecipientType.USER,),
        required_variables=("amount",),
        get_title=lambda d: "Payment failed",
        get_message=lambda d: f"We couldn't process your payment of {_money(d['amount'])}. Please update your payment method.",
    ),
    NotificationTemplate(
        type=NotificationType.PAYOUT_PROCESSED,
        recipient_types=(RecipientType.DRIVER, RecipientType.MOVER),
        required_variables=("amount",),
        get_title=lambda d: "Payout sent",
        get_message=lambda d: f"A payout of {_money(d['amount'])} is on its way.",
    ),
    NotificationTemplate(
        type=NotificationType.TIP_RECEIVED,
        recipient_types=(RecipientType.DRIVER, RecipientType.MOVER),
        required_variables=("amount",),
        get_title=lambda d: "You received a tip",
        get_message=lambda d: f"A customer tipped you {_money(d['amount'])}.",
        supports_grouping=True,
        get_group_key=lambda d: "tips",
    ),
    # Account
    NotificationTemplate(
        type=NotificationType.ACCOUNT_APPROVED,
        recipient_types=(RecipientType.DRIVER, RecipientType.MOVER),
        required_variables=("name",),
        get_title=lambda d: "Account approved",
        get_message=lambda d: f"Welcome aboard, {d['name']}! Your account has been approved.",
    ),
    NotificationTemplate(
        type=NotificationType.VEHICLE_APPROVED,
        recipient_types=(RecipientType.DRIVER, RecipientType.MOVER),
        required_variables=("vehicle",),
        get_title=lambda d: "Vehicle approved",
        get_message=lambda d: f"Your vehicle ({d['vehicle']}) has been approved.",
    ),
    NotificationTemplate(
        type=NotificationType.VEHICLE_REJECTED,
        recipient_types=(RecipientType.DRIVER, RecipientType.MOVER),
        required_variables=("vehicle",),
        get_title=lambda d: "Vehicle not approved",
        get_message=lambda d: (
            f"Your vehicle ({d['vehicle']}) was not approved."
            + (f" Reason: {d['reason']}" if d.get("reason") else "")
        ),
    ),
    NotificationTemplate(
        type=NotificationType.MOVER_PENDING_DRIVERS,
        recipient_types=(RecipientType.MOVER,),
        required_variables=("company_name",),
        get_title=lambda d: "Add drivers to go live",
        get_message=lambda d: (
            f"{d['company_name']} is approved. Add at least one approved driver "
            "to start receiving jobs."
        ),
    ),
    NotificationTemplate(
        type=NotificationType.MOVER_ACTIVATED,
        recipient_types=(RecipientType.MOVER,),
        required_variables=("company_name", "driver_name"),
        get_title=lambda d: "You're live on Stowline",
        get_message=lambda d: (
            f"{d['company_name']} is now active. {d['driver_name']} is approved, "
            "so you can start receiving jobs."
        ),
    ),
    NotificationTemplate(
        type=NotificationType.COMPLIANCE_ISSUE,
        recipient_types=(RecipientType.DRIVER, RecipientType.MOVER, RecipientType.ADMIN),
        required_variables=("issue",),
        get_title=lambda d: "Action required",
        get_message=lambda d: f"Compliance issue: {d['issue']}",
    ),
    # Feedback
    NotificationTemplate(
        type=NotificationType.FEEDBACK_RECEIVED,
        recipient_types=(RecipientType.DRIVER, RecipientType.MOVER, RecipientType.ADMIN),
        required_variables=("rating",),
        get_title=lambda d: "New feedback",
        get_message=lambda d: f"You received a {d['rating']}-star rating.",
        supports_grouping=True,
        get_group_key=lambda d: "feedback",
    ),
)

NOTIFICATION_TEMPLATES: dict[NotificationType, NotificationTemplate] = {
    t.type: t for t in _TEMPLATES
}


def get_notification_template(notification_type: NotificationType) -> NotificationTemplate:
    template = NOTIFICATION_TEMPLATES.get(notification_type)
    if template is None:
        raise ValueError(f"No template for notification type {notification_type.value}")
    return template
