"""SQLAlchemy ORM models."""

from stowline.db.models.accounts import Admin, User, VerificationCode
from stowline.db.models.appointments import Appointment, AppointmentCancellation
from stowline.db.models.audit import AdminLog
from stowline.db.models.notifications import Notification
from stowline.db.models.partners import Driver, MovingPartner, MovingPartnerDriver, Vehicle
from stowline.db.models.reviews import GoogleReview
from stowline.db.models.storage import StorageUnit, StorageUnitCleaning, StorageUnitUsage

__all__ = [
    "Admin",
    "AdminLog",
    "Appointment",
    "AppointmentCancellation",
    "Driver",
    "GoogleReview",
    "MovingPartner",
    "MovingPartnerDriver",
    "Notification",
    "StorageUnit",
    "StorageUnitCleaning",
    "StorageUnitUsage",
    "User",
    "Vehicle",
    "VerificationCode",
]
