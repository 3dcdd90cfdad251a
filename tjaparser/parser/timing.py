"""
Conversion of note track entries into absolutely timed notes and barlines.
"""
import dataclasses
import logging

from collections.abc import Sequence
from decimal import Decimal

from ..classes.base import MeasureFraction
from ..classes.chart import TimedBarline, TimedNote
from ..classes.enums import NoteType, Player
from ..classes.items import (
    BarlineOff,
    BarlineOn,
    BPMChange,
    Command,
    Delay,
    End,
    EndMeasure,
    GogoEnd,
    GogoStart,
    Measure,
    Notes,
    NoteTrackEntry,
    Scroll,
    Start,
)
from ..utils import measure_duration

__all__ = [
    "TimingState",
    "TimingResult",
    "TimingBuilder",
    "split_timing_scopes",
    "resolve_timing_scope",
    "resolve_note_track",
]

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class TimingState:
    """Running state while walking a note track."""

    bpm: Decimal
    measure: MeasureFraction = dataclasses.field(default_factory=MeasureFraction)
    scroll: Decimal = Decimal(1)
    gogo: bool = False
    barline_visible: bool = True
    cursor: Decimal = Decimal()
    """Start of the next measure, in seconds since the ``Start`` command."""


@dataclasses.dataclass(frozen=True)
class TimingResult:
    player: Player | None
    notes: list[TimedNote]
    barlines: list[TimedBarline]


@dataclasses.dataclass
class _Slot:
    note_type: NoteType | None
    bpm: Decimal
    measure: MeasureFraction
    scroll: Decimal
    gogo: bool
    delay: Decimal = Decimal()


@dataclasses.dataclass
class _MeasureOpening:
    time: Decimal
    scroll: Decimal
    visible: bool


class TimingBuilder:
    """
    Places the entries of a single timing scope on the time axis.

    A scope is one ``Start`` command and every entry following it up to (not including) the next ``Start``. Every
    slot of a measure gets an equal share of the measure, no matter how many note groups contributed slots to it.
    The share is computed from the tempo and measure length in effect at the slot, so a tempo change in the middle
    of a measure only affects the slots after it.
    """

    def __init__(self, bpm: Decimal, player: Player | None = None):
        self.state = TimingState(bpm)
        self.player = player
        self.notes: list[TimedNote] = []
        self.barlines: list[TimedBarline] = []

        self._slots: list[_Slot] = []
        self._opening: _MeasureOpening | None = None
        self._pending_delay = Decimal()
        self._closed = False

    def _open_measure(self) -> None:
        if self._opening is not None:
            return
        self.state.cursor += self._pending_delay
        self._pending_delay = Decimal()
        self._opening = _MeasureOpening(self.state.cursor, self.state.scroll, self.state.barline_visible)

    def _add_slots(self, group: Sequence[NoteType | None]) -> None:
        for note_type in group:
            self._open_measure()
            self._slots.append(
                _Slot(
                    note_type,
                    self.state.bpm,
                    self.state.measure,
                    self.state.scroll,
                    self.state.gogo,
                    self._pending_delay,
                )
            )
            self._pending_delay = Decimal()

    def _place_slots(self) -> Decimal:
        assert self._opening is not None
        slot_count = len(self._slots)
        time = self._opening.time
        if slot_count == 0:
            return time + measure_duration(self.state.bpm, self.state.measure)
        for slot in self._slots:
            time += slot.delay
            if slot.note_type is not None:
                self.notes.append(TimedNote(slot.note_type, float(time), float(slot.scroll), slot.gogo))
            time += measure_duration(slot.bpm, slot.measure) / slot_count
        return time

    def _close_measure(self, *, emit_barline: bool = True) -> None:
        self._open_measure()
        assert self._opening is not None
        end_time = self._place_slots()
        if emit_barline:
            self.barlines.append(
                TimedBarline(float(self._opening.time), float(self._opening.scroll), self._opening.visible)
            )
        self.state.cursor = end_time + self._pending_delay
        self._pending_delay = Decimal()
        self._slots = []
        self._opening = None

    def feed(self, entry: NoteTrackEntry) -> None:
        if self._closed:
            logger.warning(f"ignoring {entry} after #END")
            return

        match entry:
            case Command(command=Start()):
                raise ValueError("a timing scope cannot contain more than one Start command")
            case Command(command=End()):
                self.finish()
            case Command(command=GogoStart()):
                self.state.gogo = True
            case Command(command=GogoEnd()):
                self.state.gogo = False
            case Command(command=Measure() as measure):
                self.state.measure = measure.as_measure_fraction()
            case Command(command=BPMChange(bpm=bpm)):
                self.state.bpm = bpm
            case Command(command=Scroll(speed=speed)):
                self.state.scroll = speed
            case Command(command=Delay(seconds=seconds)):
                self._pending_delay += seconds
            case Command(command=BarlineOn()):
                self.state.barline_visible = True
            case Command(command=BarlineOff()):
                self.state.barline_visible = False
            case Notes(notes=group):
                self._add_slots(group)
            case EndMeasure():
                self._close_measure()
            case _:
                raise TypeError(f"unexpected note track entry {entry!r}")

    def finish(self) -> TimingResult:
        """Close the scope. Slots after the last comma are placed as a measure of their own, without a barline."""
        if not self._closed:
            if self._slots:
                logger.warning(f"note track ends without closing its last measure at {self.state.cursor:.3f}s")
                self._close_measure(emit_barline=False)
            self._closed = True
            logger.debug(
                f"resolved {len(self.notes)} notes and {len(self.barlines)} barlines "
                f"over {self.state.cursor:.3f}s (player: {self.player})"
            )
        return TimingResult(self.player, self.notes, self.barlines)


def split_timing_scopes(entries: Sequence[NoteTrackEntry]) -> list[Sequence[NoteTrackEntry]]:
    """
    Slice a sequence of note track entries into independent timing scopes.

    Each scope starts with a ``Start`` command.

    :raises ValueError: if the sequence does not open with a ``Start`` command.
    """
    scopes: list[Sequence[NoteTrackEntry]] = []
    scope_begin: int | None = None
    for i, entry in enumerate(entries):
        match entry:
            case Command(command=Start()):
                if scope_begin is not None:
                    scopes.append(entries[scope_begin:i])
                scope_begin = i
            case _:
                if scope_begin is None:
                    raise ValueError(f"note track must open with a Start command (got {entry!r})")
    if scope_begin is not None:
        scopes.append(entries[scope_begin:])
    return scopes


def resolve_timing_scope(scope: Sequence[NoteTrackEntry], bpm: Decimal) -> TimingResult:
    """
    Convert one timing scope into timed notes and barlines.

    :param scope: Entries of the scope, ``Start`` command first.
    :param bpm: The chart's initial tempo.
    """
    first = scope[0] if scope else None
    if not isinstance(first, Command) or not isinstance(first.command, Start):
        raise ValueError("timing scope must open with a Start command")

    builder = TimingBuilder(bpm, first.command.player)
    for entry in scope[1:]:
        builder.feed(entry)
    return builder.finish()


def resolve_note_track(entries: Sequence[NoteTrackEntry], bpm: Decimal) -> list[TimingResult]:
    """
    Convert note track entries into timed notes and barlines, one result per ``Start`` command.

    :param entries: Entries as produced by :func:`~tjaparser.parser.grammar.note_track`.
    :param bpm: The chart's initial tempo.
    """
    return [resolve_timing_scope(scope, bpm) for scope in split_timing_scopes(entries)]
