"""
In-process repository implementations (MONGO_BACKEND=memory).
"""

from .repositories import (
    InMemoryAppointmentRepository,
    InMemoryDoctorRepository,
    InMemoryPatientDirectory,
)

__all__ = [
    "InMemoryAppointmentRepository",
    "InMemoryDoctorRepository",
    "InMemoryPatientDirectory",
]
