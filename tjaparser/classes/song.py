"""
Classes that encapsulate song metadata.
"""
from dataclasses import dataclass, field
from decimal import Decimal

from .chart import Difficulty
from .enums import Course

__all__ = [
    "Song",
]


def _empty_slots() -> list[Difficulty | None]:
    return [None] * len(Course)


@dataclass
class Song:
    """A class that contains all song metadata, along with every course charted for it."""

    title: str = ""
    subtitle: str = ""
    bpm: Decimal = Decimal("120")
    audio_filename: str = ""
    demo_start_offset: float = 0.0
    offset: float = 0.0
    metadata: dict[str, str] = field(default_factory=dict)
    difficulties: list[Difficulty | None] = field(default_factory=_empty_slots)
    player_two: list[Difficulty | None] = field(default_factory=_empty_slots)

    def get_difficulty(self, course: Course, *, player_two: bool = False) -> Difficulty | None:
        slots = self.player_two if player_two else self.difficulties
        return slots[course.value]

    def set_difficulty(self, difficulty: Difficulty, *, player_two: bool = False) -> None:
        slots = self.player_two if player_two else self.difficulties
        slots[difficulty.course.value] = difficulty

    @property
    def available_courses(self) -> list[Course]:
        return [course for course in Course if self.difficulties[course.value] is not None]
