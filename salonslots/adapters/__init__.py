"""
Adapters layer - External appointment sources.
"""

from .json_appointment_store import JsonAppointmentStore

__all__ = ["JsonAppointmentStore"]
