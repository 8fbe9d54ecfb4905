from __future__ import annotations

from dataclasses import dataclass

MINUTES_PER_DAY = 24 * 60


def format_offset(minutes: int) -> str:
    """Render minutes since midnight as "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _check_bounds(kind: str, start: int, end: int) -> None:
    if not (0 <= start < end <= MINUTES_PER_DAY):
        raise ValueError(f"{kind} requires 0 <= start < end <= {MINUTES_PER_DAY}, got {start}-{end}")


@dataclass(frozen=True, order=True)
class TimeSlot:
    """A candidate appointment window, in minutes since midnight (half-open)."""

    start: int
    end: int

    def __post_init__(self) -> None:
        _check_bounds("TimeSlot", self.start, self.end)

    @property
    def duration_minutes(self) -> int:
        return self.end - self.start

    @property
    def start_label(self) -> str:
        return format_offset(self.start)

    @property
    def end_label(self) -> str:
        return format_offset(self.end)

    @property
    def label(self) -> str:
        return f"{self.start_label}-{self.end_label}"


@dataclass(frozen=True)
class BookedInterval:
    """One unit of consumed capacity.

    Pending appointments contribute one interval per ranked candidate slot, all
    sharing the same appointment_id; such an appointment occupies a slot at most
    once however many of its candidates overlap it.
    """

    start: int
    end: int
    appointment_id: str | None = None
    pending: bool = False

    def __post_init__(self) -> None:
        _check_bounds("BookedInterval", self.start, self.end)

    @property
    def label(self) -> str:
        return f"{format_offset(self.start)}-{format_offset(self.end)}"


@dataclass(frozen=True)
class ManualBlock:
    start: int
    end: int
    reason: str | None = None  # e.g. "manually_set"

    def __post_init__(self) -> None:
        _check_bounds("ManualBlock", self.start, self.end)

    @property
    def label(self) -> str:
        return f"{format_offset(self.start)}-{format_offset(self.end)}"
