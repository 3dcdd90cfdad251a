"""
General purpose enumerations.
"""
from enum import Enum, unique

__all__ = [
    "NoteType",
    "Player",
    "Course",
    "NOTE_DIGIT_MAP",
]


@unique
class NoteType(Enum):
    """Enumeration for the playable note symbols. Rests are not notes and are represented by `None`."""

    DON = 1
    KAT = 2
    BIG_DON = 3
    BIG_KAT = 4
    DRUMROLL_START = 5
    BIG_DRUMROLL_START = 6
    BALLOON_START = 7
    ROLL_END = 8

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()

    @property
    def is_big(self) -> bool:
        return self in (NoteType.BIG_DON, NoteType.BIG_KAT, NoteType.BIG_DRUMROLL_START)


# fmt: off
NOTE_DIGIT_MAP: dict[str, NoteType | None] = {
    "0": None,
    "1": NoteType.DON,
    "2": NoteType.KAT,
    "3": NoteType.BIG_DON,
    "4": NoteType.BIG_KAT,
    "5": NoteType.DRUMROLL_START,
    "6": NoteType.BIG_DRUMROLL_START,
    "7": NoteType.BALLOON_START,
    "8": NoteType.ROLL_END,
    # Kusudama, played as a balloon
    "9": NoteType.BALLOON_START,
}
# fmt: on


class Player(Enum):
    """Enumeration for the player side of a note track."""

    PLAYER1 = "P1"
    PLAYER2 = "P2"

    def __str__(self) -> str:
        return self.value


class Course(Enum):
    """Enumeration for the difficulty slot. The value doubles as the index into a song's difficulty list."""

    EASY = 0
    NORMAL = 1
    HARD = 2
    ONI = 3
    URA = 4

    def __str__(self) -> str:
        return f"{self.name.capitalize()} ({self.value})"

    @classmethod
    def from_string(cls, s: str) -> "Course":
        """
        Convert the value of a ``COURSE`` header into a course.

        :param s: Either a course name (case-insensitive, ``Edit`` being an alias of ``Ura``) or its index.
        :raises ValueError: if the value matches no course.
        """
        s = s.strip()
        if s.isdigit():
            return cls(int(s))
        name = s.upper()
        if name == "EDIT":
            return cls.URA
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f'unrecognized course "{s}"') from None
