"""
Repository ports for the booking core.
"""

from .appointment_repo import AppointmentRepository
from .doctor_repo import DoctorRepository
from .patient_directory import PatientDirectory

__all__ = [
    "AppointmentRepository",
    "DoctorRepository",
    "PatientDirectory",
]
