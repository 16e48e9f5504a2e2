"""
Application service for resolving bookable slots.

The service coordinates fetching existing appointments via an occupancy
fetcher adapter and delegates the slot arithmetic to the domain-level
``SlotCalculator``. The booking UI only ever talks to
``AvailabilityService.get_available_slots``.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional, Protocol, Sequence

from ..domain.availability import resolve_day_schedule
from ..domain.exceptions import UnknownServiceError
from ..domain.models import ExistingAppointment, Professional, Service, total_duration
from ..domain.slot_calculator import SlotCalculator, validate_duration

logger = logging.getLogger(__name__)

SLOT_FORMAT = "HH:mm"


class OccupancyFetcherProtocol(Protocol):
    """Protocol describing the appointment source needed by the service."""

    async def fetch_appointments(
        self,
        professional_id: str,
        target_date: date,
    ) -> Sequence[ExistingAppointment]:
        """Return active appointments for one professional on one calendar date."""


class AvailabilityService:
    """
    Orchestrates availability resolution, slot generation, appointment
    retrieval and overlap filtering, in that order.

    The result is advisory: two clients may see the same free slot. The
    booking write path must refuse overlapping active appointments.
    """

    def __init__(
        self,
        occupancy_fetcher: OccupancyFetcherProtocol,
        slot_calculator: SlotCalculator,
    ) -> None:
        self._occupancy_fetcher = occupancy_fetcher
        self._slot_calculator = slot_calculator

    async def get_available_slots(
        self,
        professional: Professional,
        duration_minutes: int,
        target_date: date,
        now: Optional[datetime] = None,
    ) -> List[str]:
        """
        Return the bookable start times as ``HH:MM`` strings.

        A closed day yields an empty list rather than an error. Errors raised
        by the occupancy fetcher propagate unchanged.
        """
        validate_duration(duration_minutes)

        day_schedule = resolve_day_schedule(professional.availability, target_date)
        windows = day_schedule.active_windows()

        if not windows:
            logger.info("%s is not available on %s", professional.name, target_date)
            return []

        candidates = self._slot_calculator.generate_candidate_slots(
            windows=windows,
            duration_minutes=duration_minutes,
            target_date=target_date,
            now=now,
            step_minutes=professional.slot_interval_minutes,
        )

        if not candidates:
            return []

        appointments = await self.fetch_active_appointments(professional.id, target_date)

        available = self._slot_calculator.filter_available(
            candidates=candidates,
            duration_minutes=duration_minutes,
            existing_appointments=appointments,
        )

        logger.debug(
            "%s on %s: %d candidates, %d appointments, %d available",
            professional.name,
            target_date,
            len(candidates),
            len(appointments),
            len(available),
        )

        return [slot.format(SLOT_FORMAT) for slot in available]

    async def get_available_slots_for_services(
        self,
        professional: Professional,
        service_names: Sequence[str],
        target_date: date,
        now: Optional[datetime] = None,
    ) -> List[str]:
        """
        Resolve the named services, sum their durations and look up slots
        for the combined booking.
        """
        services = self.resolve_services(professional, service_names)
        return await self.get_available_slots(
            professional=professional,
            duration_minutes=total_duration(services),
            target_date=target_date,
            now=now,
        )

    async def fetch_active_appointments(
        self,
        professional_id: str,
        target_date: date,
    ) -> List[ExistingAppointment]:
        """
        Fetch appointments and keep only the ones that still block time.

        Fetchers are expected to return active appointments only; cancelled
        entries that slip through are dropped here.
        """
        appointments = await self._occupancy_fetcher.fetch_appointments(
            professional_id,
            target_date,
        )
        return [appointment for appointment in appointments if appointment.is_active]

    @staticmethod
    def resolve_services(
        professional: Professional,
        service_names: Sequence[str],
    ) -> List[Service]:
        """
        Look up services by name on the professional.

        Raises:
            UnknownServiceError: If any name is not offered by the professional
        """
        services: List[Service] = []
        unknown: List[str] = []

        for name in service_names:
            service = professional.find_service(name)
            if service is None:
                unknown.append(name)
            else:
                services.append(service)

        if unknown:
            raise UnknownServiceError(
                f"{professional.name} does not offer: {', '.join(unknown)}"
            )

        return services
