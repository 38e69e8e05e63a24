"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Literal, Tuple

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .adapters.validation import MEETING_ID_PATTERN
from .domain.exceptions import UnknownParticipantError
from .domain.slot_catalog import DEFAULT_HOURS_BY_DAY, SlotCatalog

DEFAULT_PARTICIPANTS = ["I", "To", "M", "Ta", "JS", "H"]
DEFAULT_DAY_NAMES = ["E", "T", "K", "N", "R", "L", "P"]


class StoreConfig(BaseModel):
    """Where weekly state is persisted."""
    backend: Literal["file", "http", "cache"] = "file"
    data_file: Path = Path("data/meetings.json")
    base_url: str = "http://localhost:3000"
    cache_dir: Path = Field(default_factory=lambda: Path.home() / ".meetingplanner" / "cache")
    timeout_seconds: float = 10.0

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        """Ensure the HTTP timeout is positive."""
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class AppConfig(BaseModel):
    """Application configuration."""
    meeting_id: str = "default"
    participants: List[str] = Field(default_factory=lambda: list(DEFAULT_PARTICIPANTS))
    day_names: List[str] = Field(default_factory=lambda: list(DEFAULT_DAY_NAMES))
    hours_by_day: List[Tuple[int, int]] = Field(
        default_factory=lambda: [tuple(entry) for entry in DEFAULT_HOURS_BY_DAY]
    )
    store: StoreConfig = Field(default_factory=StoreConfig)

    @field_validator("meeting_id")
    @classmethod
    def validate_meeting_id(cls, value: str) -> str:
        if not MEETING_ID_PATTERN.fullmatch(value):
            raise ValueError(
                f"meeting_id must be 1-64 characters of letters, digits, '_' or '-', got {value!r}"
            )
        return value

    @field_validator("participants")
    @classmethod
    def validate_participants(cls, value: List[str]) -> List[str]:
        """Ensure participant names are present and unique."""
        if not value:
            raise ValueError("At least one participant must be configured")
        seen: set[str] = set()
        for name in value:
            key = name.strip().lower()
            if not key:
                raise ValueError("Participant names must not be empty")
            if key in seen:
                raise ValueError(f"Duplicate participant name detected: {name}")
            seen.add(key)
        return value

    @field_validator("day_names")
    @classmethod
    def validate_day_names(cls, value: List[str]) -> List[str]:
        if len(value) != 7:
            raise ValueError(f"day_names must have 7 entries, got {len(value)}")
        return value

    @model_validator(mode="after")
    def validate_hours_by_day(self) -> "AppConfig":
        """Ensure every weekday has a valid opening window."""
        try:
            SlotCatalog(self.hours_by_day)
        except ValueError as exc:
            raise ValueError(f"Invalid hours_by_day: {exc}") from exc
        return self

    def build_catalog(self) -> SlotCatalog:
        """Slot catalog for the configured operating hours."""
        return SlotCatalog(self.hours_by_day)

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

        return cls(**data)

    def resolve_participant(self, identifier: str) -> int:
        """
        Resolve a participant name or 1-based roster number to its index.

        Args:
            identifier: Name (case-insensitive) or number as shown by `participants`

        Returns:
            0-based participant index

        Raises:
            UnknownParticipantError: If identifier cannot be resolved
        """
        value = identifier.strip()

        for index, name in enumerate(self.participants):
            if name.lower() == value.lower():
                return index

        if value.isdigit():
            number = int(value)
            if 1 <= number <= len(self.participants):
                return number - 1

        raise UnknownParticipantError(
            f"Unknown participant: '{identifier}'. "
            f"Use one of {', '.join(self.participants)} or a number 1-{len(self.participants)}."
        )


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
