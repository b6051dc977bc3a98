"""
Value objects package for domain layer.
"""

from .actor import Actor, AdminActor, PatientActor
from .object_id import AppointmentId, DoctorId
from .slot import Slot
from .snapshots import DoctorSnapshot, PatientSnapshot

__all__ = [
    "Actor",
    "AdminActor",
    "PatientActor",
    "AppointmentId",
    "DoctorId",
    "Slot",
    "DoctorSnapshot",
    "PatientSnapshot",
]
