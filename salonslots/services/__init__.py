"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability_service import AvailabilityService, OccupancyFetcherProtocol

__all__ = ["AvailabilityService", "OccupancyFetcherProtocol"]
