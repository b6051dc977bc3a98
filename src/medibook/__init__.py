"""
MediBook: medical appointment booking service

Doctors publish availability, patients book time slots, and administrators
handle cancellations. The slot allocation layer keeps each doctor's available
and booked slots consistent with the appointment records.
"""

__version__ = "0.1.0"
__author__ = "MediBook Team"
__description__ = "Medical appointment booking service"
