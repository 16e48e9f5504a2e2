"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Dict, List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import (
    DaySchedule,
    Professional,
    Service,
    TimeWindow,
    WeeklyAvailability,
    Weekday,
    parse_clock_time,
)

# Shift assigned when a day is switched on without any slots
DEFAULT_SHIFT = ("09:00", "18:00")


class DefaultsConfig(BaseModel):
    """Default settings for slot generation."""
    slot_interval_minutes: int = 15

    @field_validator("slot_interval_minutes")
    @classmethod
    def validate_interval(cls, value: int) -> int:
        """Ensure the step granularity is positive."""
        if value <= 0:
            raise ValueError("slot_interval_minutes must be greater than zero")
        return value


class SlotConfig(BaseModel):
    """A working window in HH:MM notation."""
    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def validate_clock(cls, value: str) -> str:
        """Validate the HH:MM format."""
        parse_clock_time(value)
        return value.strip()

    def to_window(self) -> TimeWindow:
        return TimeWindow.parse(self.start, self.end)


class DayAvailabilityConfig(BaseModel):
    """Availability entry for one day of the week."""
    day_of_week: Weekday
    is_available: bool = False
    slots: List[SlotConfig] = Field(default_factory=list)

    @field_validator("day_of_week", mode="before")
    @classmethod
    def normalize_day(cls, value):
        """Accept day names in any case ("monday", "Monday")."""
        if isinstance(value, str):
            return value.strip().capitalize()
        return value

    @model_validator(mode="after")
    def apply_default_shift(self) -> "DayAvailabilityConfig":
        """An enabled day without slots gets the default shift."""
        if self.is_available and not self.slots:
            self.slots = [SlotConfig(start=DEFAULT_SHIFT[0], end=DEFAULT_SHIFT[1])]
        return self

    def to_schedule(self) -> DaySchedule:
        return DaySchedule(
            is_available=self.is_available,
            windows=tuple(slot.to_window() for slot in self.slots),
        )


class ServiceConfig(BaseModel):
    """Service offered by a professional."""
    name: str
    duration_minutes: int

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure service duration is positive."""
        if value <= 0:
            raise ValueError("duration_minutes must be greater than zero")
        return value


class ProfessionalConfig(BaseModel):
    """Professional configuration."""
    id: str
    name: str
    slot_interval_minutes: Optional[int] = None
    services: List[ServiceConfig] = Field(default_factory=list)
    availability: List[DayAvailabilityConfig] = Field(default_factory=list)

    @field_validator("slot_interval_minutes")
    @classmethod
    def validate_interval(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            raise ValueError("slot_interval_minutes must be greater than zero")
        return value

    @field_validator("availability")
    @classmethod
    def validate_unique_days(cls, value: List[DayAvailabilityConfig]) -> List[DayAvailabilityConfig]:
        """Ensure each weekday appears at most once."""
        seen: set[Weekday] = set()
        for entry in value:
            if entry.day_of_week in seen:
                raise ValueError(f"Duplicate availability entry for {entry.day_of_week.value}")
            seen.add(entry.day_of_week)
        return value

    def to_domain(self, default_interval: int) -> Professional:
        """Build the domain Professional, filling missing weekdays as closed."""
        days: Dict[Weekday, DaySchedule] = {
            entry.day_of_week: entry.to_schedule() for entry in self.availability
        }
        return Professional(
            id=self.id,
            name=self.name,
            availability=WeeklyAvailability.from_days(days),
            slot_interval_minutes=self.slot_interval_minutes or default_interval,
            services=[
                Service(name=service.name, duration_minutes=service.duration_minutes)
                for service in self.services
            ],
        )


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "America/Sao_Paulo"
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    appointments_file: Optional[Path] = None
    professionals: List[ProfessionalConfig] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA identifier."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("professionals")
    @classmethod
    def validate_professionals(cls, value: List[ProfessionalConfig]) -> List[ProfessionalConfig]:
        """Ensure professional ids and names are unique."""
        seen_ids: set[str] = set()
        seen_names: set[str] = set()
        for professional in value:
            name_key = professional.name.lower()
            if professional.id in seen_ids:
                raise ValueError(f"Duplicate professional id detected: {professional.id}")
            if name_key in seen_names:
                raise ValueError(f"Duplicate professional name detected: {professional.name}")
            seen_ids.add(professional.id)
            seen_names.add(name_key)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        # Relative appointment paths are resolved next to the config file
        if config.appointments_file and not config.appointments_file.is_absolute():
            config.appointments_file = config_path.parent / config.appointments_file

        return config

    def find_professional(self, identifier: str) -> ProfessionalConfig | None:
        """Find a professional by id or name (case-insensitive)."""
        for professional in self.professionals:
            if professional.id == identifier or professional.name.lower() == identifier.lower():
                return professional
        return None

    def resolve_professional(self, identifier: str) -> Professional:
        """
        Resolve a professional identifier (id or name) to a domain Professional.

        Raises:
            ValueError: If identifier cannot be resolved
        """
        professional = self.find_professional(identifier)
        if professional is None:
            raise ValueError(
                f"Unknown professional: '{identifier}'. "
                f"Use a configured id or name."
            )
        return professional.to_domain(self.defaults.slot_interval_minutes)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
