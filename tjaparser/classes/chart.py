"""
Classes that represent chart-related entities.
"""
from collections.abc import Iterable
from dataclasses import dataclass, field

from .base import Validateable
from .enums import Course, NoteType

__all__ = [
    "TimedNote",
    "TimedBarline",
    "Difficulty",
]


@dataclass(frozen=True)
class TimedNote(Validateable):
    """A class that represents a note placed at an absolute point in time."""

    note_type: NoteType
    time_seconds: float
    scroll_speed: float = 1.0
    gogo: bool = False

    def __post_init__(self):
        self.validate()

    def validate(self):
        if self.time_seconds < 0:
            raise ValueError(f"time cannot be negative (got {self.time_seconds})")


@dataclass(frozen=True)
class TimedBarline(Validateable):
    """A class that represents a measure boundary marker."""

    time_seconds: float
    scroll_speed: float = 1.0
    visible: bool = True

    def __post_init__(self):
        self.validate()

    def validate(self):
        if self.time_seconds < 0:
            raise ValueError(f"time cannot be negative (got {self.time_seconds})")


@dataclass
class Difficulty:
    """
    A class that contains the time-resolved chart of a single course.

    Instances of this class are not intended to be modified after created by the parser classes.
    """

    course: Course = Course.ONI
    star_level: int = 0
    notes: list[TimedNote] = field(default_factory=list)
    barlines: list[TimedBarline] = field(default_factory=list)
    balloons: list[int] = field(default_factory=list)

    def iter_hits(self) -> Iterable[TimedNote]:
        """Iterate over notes that are hit once, i.e. everything except rolls and balloons."""
        for note in self.notes:
            if note.note_type in (NoteType.DON, NoteType.KAT, NoteType.BIG_DON, NoteType.BIG_KAT):
                yield note

    @property
    def hit_count(self) -> int:
        return sum(1 for _ in self.iter_hits())

    @property
    def length(self) -> float:
        """Time of the last note or barline, in seconds."""
        last_times = [0.0]
        if self.notes:
            last_times.append(self.notes[-1].time_seconds)
        if self.barlines:
            last_times.append(self.barlines[-1].time_seconds)
        return max(last_times)
