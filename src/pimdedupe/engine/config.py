"""Duplicate detection configuration dataclasses.

Configs are immutable values built once per call by a single
apply-defaults step (``from_overrides``); they are never persisted and
never shared across calls.
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields, replace
from datetime import timedelta
from typing import Any, TypeVar

DEFAULT_DATE_TOLERANCE = timedelta(minutes=1)

_C = TypeVar("_C", "DuplicateDetectionConfig", "TaskDuplicateConfig", "EventDuplicateConfig")


@dataclass(frozen=True)
class DuplicateDetectionConfig:
    """Signals participating in contact duplicate matching.

    Attributes
    ----------
    use_uid : bool
        If both records carry a uid, decide solely by uid equality
        (default: True).
    use_name : bool
        Compare normalized display names (default: True).
    use_email : bool
        Compare normalized email sets (default: True).
    use_phone : bool
        Compare digit-normalized phone sets (default: False).
    """

    use_uid: bool = True
    use_name: bool = True
    use_email: bool = True
    use_phone: bool = False

    @classmethod
    def from_overrides(
        cls, overrides: Mapping[str, Any] | None = None
    ) -> "DuplicateDetectionConfig":
        """Merge *overrides* onto the defaults.

        Parameters
        ----------
        overrides : Mapping[str, Any] | None, optional
            Field values to override; missing keys keep their defaults.

        Returns
        -------
        DuplicateDetectionConfig
            Fully-populated config.

        Raises
        ------
        ValueError
            If *overrides* names an unknown field.
        """
        return _apply_overrides(cls(), overrides)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass(frozen=True)
class TaskDuplicateConfig:
    """Signals participating in task duplicate matching.

    Attributes
    ----------
    use_uid : bool
        If both tasks carry a uid, decide solely by uid equality
        (default: True).
    use_title : bool
        Require equal normalized titles (default: True).
    date_tolerance : timedelta
        Maximum distance between effective dates (default: 1 minute).
        Also the width of the date buckets used in comparison keys.
    """

    use_uid: bool = True
    use_title: bool = True
    date_tolerance: timedelta = DEFAULT_DATE_TOLERANCE

    def __post_init__(self) -> None:
        """Coerce numeric tolerances and validate."""
        object.__setattr__(self, "date_tolerance", _coerce_tolerance(self.date_tolerance))

    @property
    def tolerance_ms(self) -> int:
        """Date tolerance in whole milliseconds (at least 1)."""
        return max(1, self.date_tolerance // timedelta(milliseconds=1))

    @classmethod
    def from_overrides(cls, overrides: Mapping[str, Any] | None = None) -> "TaskDuplicateConfig":
        """Merge *overrides* onto the defaults.

        ``date_tolerance`` may be a ``timedelta`` or a number of seconds.

        Raises
        ------
        ValueError
            If *overrides* names an unknown field or the tolerance is
            not positive.
        """
        return _apply_overrides(cls(), overrides)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "use_uid": self.use_uid,
            "use_title": self.use_title,
            "date_tolerance_seconds": self.date_tolerance.total_seconds(),
        }


@dataclass(frozen=True)
class EventDuplicateConfig:
    """Signals participating in calendar event duplicate matching.

    Attributes
    ----------
    use_uid : bool
        If both events carry a uid, decide solely by uid equality
        (default: True).
    use_title : bool
        Require equal normalized titles (default: True).
    use_location : bool
        Require equal normalized locations (default: False).
    date_tolerance : timedelta
        Maximum distance between start dates and between end dates
        (default: 1 minute). Also the width of the start-date buckets.
    """

    use_uid: bool = True
    use_title: bool = True
    use_location: bool = False
    date_tolerance: timedelta = DEFAULT_DATE_TOLERANCE

    def __post_init__(self) -> None:
        object.__setattr__(self, "date_tolerance", _coerce_tolerance(self.date_tolerance))

    @property
    def tolerance_ms(self) -> int:
        """Date tolerance in whole milliseconds (at least 1)."""
        return max(1, self.date_tolerance // timedelta(milliseconds=1))

    @classmethod
    def from_overrides(cls, overrides: Mapping[str, Any] | None = None) -> "EventDuplicateConfig":
        """Merge *overrides* onto the defaults (tolerance in seconds or timedelta)."""
        return _apply_overrides(cls(), overrides)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "use_uid": self.use_uid,
            "use_title": self.use_title,
            "use_location": self.use_location,
            "date_tolerance_seconds": self.date_tolerance.total_seconds(),
        }


def resolve_config(
    config: DuplicateDetectionConfig | Mapping[str, Any] | None,
) -> DuplicateDetectionConfig:
    """Return a contact config from None, a mapping, or a config."""
    if isinstance(config, DuplicateDetectionConfig):
        return config
    return DuplicateDetectionConfig.from_overrides(config)


def resolve_task_config(
    config: TaskDuplicateConfig | Mapping[str, Any] | None,
) -> TaskDuplicateConfig:
    """Return a task config from None, a mapping, or a config."""
    if isinstance(config, TaskDuplicateConfig):
        return config
    return TaskDuplicateConfig.from_overrides(config)


def resolve_event_config(
    config: EventDuplicateConfig | Mapping[str, Any] | None,
) -> EventDuplicateConfig:
    """Return an event config from None, a mapping, or a config."""
    if isinstance(config, EventDuplicateConfig):
        return config
    return EventDuplicateConfig.from_overrides(config)


def _coerce_tolerance(value: timedelta | float) -> timedelta:
    if isinstance(value, int | float):
        value = timedelta(seconds=value)
    if value <= timedelta(0):
        raise ValueError(f"date_tolerance must be positive, got {value}")
    return value


def _apply_overrides(defaults: _C, overrides: Mapping[str, Any] | None) -> _C:
    if not overrides:
        return defaults

    valid = {f.name for f in fields(defaults)}
    unknown = sorted(set(overrides) - valid)
    if unknown:
        raise ValueError(
            f"Unknown config option(s): {', '.join(unknown)}. Valid options: {', '.join(sorted(valid))}"
        )
    return replace(defaults, **overrides)
