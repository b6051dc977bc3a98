"""
MongoDB repository implementations.
"""

from .appointment_repository import MongoAppointmentRepository
from .doctor_repository import MongoDoctorRepository
from .patient_directory import MongoPatientDirectory

__all__ = [
    "MongoAppointmentRepository",
    "MongoDoctorRepository",
    "MongoPatientDirectory",
]
