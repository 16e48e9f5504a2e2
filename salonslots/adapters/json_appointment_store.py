"""
JSON-file appointment store for running without a database.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List

import pendulum

from ..domain.exceptions import OccupancyFetchError
from ..domain.models import AppointmentStatus, ExistingAppointment

logger = logging.getLogger(__name__)


class JsonAppointmentStore:
    """
    Occupancy fetcher backed by a JSON file.

    The file holds an array of appointment records::

        [
            {
                "professionalId": "ana",
                "start": "2024-11-25T10:00:00",
                "end": "2024-11-25T10:30:00",
                "status": "scheduled"
            }
        ]

    Timestamps without an offset are read in the store's timezone.
    """

    def __init__(self, data_file: Path, timezone: str = "UTC"):
        """
        Initialize the store.

        Args:
            data_file: Path to the JSON appointments file
            timezone: IANA timezone identifier used for naive timestamps

        Raises:
            OccupancyFetchError: If the file cannot be read or is not a JSON array
        """
        self.data_file = data_file
        self.timezone = timezone
        self.records = self._load_records()

    def _load_records(self) -> List[Dict[str, Any]]:
        """Load appointment records from the JSON file."""
        if not self.data_file.exists():
            raise OccupancyFetchError(f"Appointments file not found: {self.data_file}")

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise OccupancyFetchError(f"Could not read appointments from {self.data_file}: {exc}") from exc

        if not isinstance(data, list):
            raise OccupancyFetchError("Appointments file must contain a JSON array at the root level.")

        return data

    async def fetch_appointments(
        self,
        professional_id: str,
        target_date: date,
    ) -> List[ExistingAppointment]:
        """
        Return active appointments for one professional touching ``target_date``.

        Args:
            professional_id: Identifier of the professional
            target_date: Calendar date in the store's timezone

        Returns:
            List of ExistingAppointment objects, in file order
        """
        day_start = pendulum.datetime(
            target_date.year, target_date.month, target_date.day, tz=self.timezone
        )
        day_end = day_start.add(days=1)
        appointments: List[ExistingAppointment] = []

        for record in self.records:
            if not isinstance(record, dict) or record.get("professionalId") != professional_id:
                continue

            try:
                appointment = self._parse_record(record, professional_id)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping invalid appointment record %r: %s", record, e)
                continue

            if not appointment.is_active:
                continue

            if appointment.start < day_end and appointment.end > day_start:
                appointments.append(appointment)

        return appointments

    def _parse_record(self, record: Dict[str, Any], professional_id: str) -> ExistingAppointment:
        start = pendulum.parse(record["start"], tz=self.timezone)
        end = pendulum.parse(record["end"], tz=self.timezone)

        if not isinstance(start, pendulum.DateTime) or not isinstance(end, pendulum.DateTime):
            raise ValueError("start and end must be date-times")
        if start >= end:
            raise ValueError(f"start {start} is not before end {end}")

        status = AppointmentStatus(record.get("status", AppointmentStatus.SCHEDULED.value))

        return ExistingAppointment(
            start=start,
            end=end,
            status=status,
            professional_id=professional_id,
        )
