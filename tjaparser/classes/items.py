"""
Classes that represent the items recognized by the chart source grammar.

Every group of classes here forms a closed set of variants; consumers are expected to dispatch on them with
``match`` statements.
"""
from dataclasses import dataclass
from decimal import Decimal

from .base import MeasureFraction, Validateable
from .enums import NoteType, Player

__all__ = [
    "Start",
    "End",
    "GogoStart",
    "GogoEnd",
    "Measure",
    "BPMChange",
    "Scroll",
    "Delay",
    "BarlineOn",
    "BarlineOff",
    "TrackCommand",
    "Command",
    "Notes",
    "EndMeasure",
    "NoteTrackEntry",
    "Metadata",
    "NoteTrack",
    "ChartItem",
]


# Track commands
@dataclass(frozen=True)
class Start:
    """Opens a note track, optionally for one side of a double-play chart."""

    player: Player | None = None


@dataclass(frozen=True)
class End:
    """Closes a note track."""

    pass


@dataclass(frozen=True)
class GogoStart:
    pass


@dataclass(frozen=True)
class GogoEnd:
    pass


@dataclass(frozen=True)
class Measure(Validateable):
    """Changes the length of the following measures."""

    numerator: int
    denominator: int

    def __post_init__(self):
        self.validate()

    def validate(self):
        if self.numerator <= 0 or self.denominator <= 0:
            raise ValueError(f"measure must be positive (got {self.numerator}/{self.denominator})")

    def as_measure_fraction(self) -> MeasureFraction:
        return MeasureFraction(self.numerator, self.denominator)


@dataclass(frozen=True)
class BPMChange(Validateable):
    """Changes the tempo from this point on."""

    bpm: Decimal

    def __post_init__(self):
        self.validate()

    def validate(self):
        if self.bpm <= 0:
            raise ValueError(f"bpm must be positive (got {self.bpm})")


@dataclass(frozen=True)
class Scroll:
    """Changes the scroll speed multiplier from this point on."""

    speed: Decimal


@dataclass(frozen=True)
class Delay:
    """Shifts everything after this point by an amount of seconds."""

    seconds: Decimal


@dataclass(frozen=True)
class BarlineOn:
    pass


@dataclass(frozen=True)
class BarlineOff:
    pass


TrackCommand = Start | End | GogoStart | GogoEnd | Measure | BPMChange | Scroll | Delay | BarlineOn | BarlineOff


# Note track entries
@dataclass(frozen=True)
class Command:
    """A command line inside a note track."""

    command: TrackCommand


@dataclass(frozen=True)
class Notes:
    """
    A run of note digits.

    Slots are ordered left-to-right, i.e. in ascending time. `None` marks a rest.
    """

    notes: tuple[NoteType | None, ...]


@dataclass(frozen=True)
class EndMeasure:
    """A comma, closing the current measure."""

    pass


NoteTrackEntry = Command | Notes | EndMeasure


# Top-level chart items
@dataclass(frozen=True)
class Metadata:
    """A ``KEY:VALUE`` header line."""

    key: str
    value: str


@dataclass(frozen=True)
class NoteTrack:
    """A full ``#START``...``#END`` block."""

    entries: tuple[NoteTrackEntry, ...]


ChartItem = Metadata | NoteTrack
