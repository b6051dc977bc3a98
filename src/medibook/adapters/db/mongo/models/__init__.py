"""
MongoDB Beanie document models.
"""

from .appointment_m import AppointmentMongo, DoctorSnapshotMongo, PatientSnapshotMongo
from .doctor_m import AvailableSlotMongo, BookedSlotMongo, DoctorMongo
from .patient_m import PatientMongo

DOCUMENT_MODELS = [DoctorMongo, AppointmentMongo, PatientMongo]

__all__ = [
    "AppointmentMongo",
    "AvailableSlotMongo",
    "BookedSlotMongo",
    "DoctorMongo",
    "DoctorSnapshotMongo",
    "DOCUMENT_MODELS",
    "PatientMongo",
    "PatientSnapshotMongo",
]
