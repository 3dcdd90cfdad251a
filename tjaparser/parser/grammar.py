"""
Recognizers for the TJA chart source grammar.

Every recognizer takes the remaining input and returns a ``(value, rest)`` tuple, where ``rest`` is the input
left after the recognized text. A recognizer that cannot match raises :class:`TJASyntaxError`; nothing is ever
skipped to recover from a mismatch.
"""
import logging
import re

from decimal import Decimal

from ..classes.base import TJASyntaxError
from ..classes.enums import NOTE_DIGIT_MAP, NoteType, Player
from ..classes.items import (
    BarlineOff,
    BarlineOn,
    BPMChange,
    ChartItem,
    Command,
    Delay,
    End,
    EndMeasure,
    GogoEnd,
    GogoStart,
    Measure,
    Metadata,
    Notes,
    NoteTrack,
    NoteTrackEntry,
    Scroll,
    Start,
    TrackCommand,
)
from ..utils import check_tempo, parse_decimal

__all__ = [
    "preprocess_tja_file",
    "metadata_tagname",
    "metadata_pair",
    "start_command",
    "end_command",
    "inner_track_command",
    "notes",
    "measure_end",
    "note_track",
    "tja_file",
]

BYTE_ORDER_MARK = "\ufeff"
COMMENT_REGEX = re.compile(r"//[^\r\n]*")
TAG_NAME_REGEX = re.compile(r"[A-Z0-9]+(?=:)")
METADATA_VALUE_REGEX = re.compile(r":([^\n]*?)\r?(?:\n|\Z)")
START_REGEX = re.compile(r"#START(?: (P1|P2))?\r?(?:\n|\Z)")
END_REGEX = re.compile(r"#END[ \t]*\r?(?:\n|\Z)")
COMMAND_REGEX = re.compile(r"#([A-Z]+)([^\r\n]*?)[ \t]*\r?(?:\n|\Z)")
MEASURE_ARG_REGEX = re.compile(r"([0-9]+)/([0-9]+)")
NOTES_REGEX = re.compile(r"[0-9]+(?=[ \t]*(?:,|\r?\n|\Z))")
PREVIEW_LENGTH = 40

logger = logging.getLogger(__name__)


def _preview(text: str) -> str:
    line = text.split("\n", 1)[0].rstrip("\r")
    if not line:
        return "end of input" if not text else "an empty line"
    if len(line) > PREVIEW_LENGTH:
        line = line[:PREVIEW_LENGTH] + "..."
    return f'"{line}"'


def _skip_blank(text: str) -> str:
    return text.lstrip()


def preprocess_tja_file(text: str) -> str:
    """
    Strip comments from raw chart source.

    Everything from ``//`` up to the end of its line is removed. Line terminators are kept, so line numbers in the
    result match the input.
    """
    if text.startswith(BYTE_ORDER_MARK):
        text = text[len(BYTE_ORDER_MARK) :]
    return COMMENT_REGEX.sub("", text)


# Metadata
def metadata_tagname(text: str) -> tuple[str, str]:
    """Recognize an uppercase alphanumeric tag name. The ``:`` following it is left in the remainder."""
    match = TAG_NAME_REGEX.match(text)
    if match is None:
        raise TJASyntaxError(f"expected a metadata line, got {_preview(text)}", rest=text)
    return match.group(0), text[match.end() :]


def metadata_pair(text: str) -> tuple[tuple[str, str], str]:
    """Recognize a ``KEY:VALUE`` line. The line terminator is consumed but not included in the value."""
    key, rest = metadata_tagname(text)
    match = METADATA_VALUE_REGEX.match(rest)
    if match is None:
        raise TJASyntaxError(f"expected a metadata line, got {_preview(text)}", rest=text)
    return (key, match.group(1).strip()), rest[match.end() :]


# Note tracks
def start_command(text: str) -> tuple[Start, str]:
    """Recognize ``#START``, optionally followed by a single space and a player designator."""
    text = _skip_blank(text)
    match = START_REGEX.match(text)
    if match is None:
        raise TJASyntaxError(f"expected #START or #START P1/P2, got {_preview(text)}", rest=text)
    player = Player(match.group(1)) if match.group(1) is not None else None
    return Start(player), text[match.end() :]


def end_command(text: str) -> tuple[End, str]:
    """Recognize ``#END``. Nothing but blanks may follow it on the same line."""
    text = _skip_blank(text)
    match = END_REGEX.match(text)
    if match is None:
        raise TJASyntaxError(f"expected #END, got {_preview(text)}", rest=text)
    return End(), text[match.end() :]


def _no_argument(name: str, argument: str, text: str) -> None:
    if argument:
        raise TJASyntaxError(f'#{name} takes no argument (got "{argument}")', rest=text)


def _number_argument(name: str, argument: str, text: str) -> Decimal:
    if not argument:
        raise TJASyntaxError(f"#{name} requires a value", rest=text)
    try:
        return parse_decimal(argument)
    except ValueError as e:
        raise TJASyntaxError(f"#{name}: {e}", rest=text) from e


def _measure_argument(argument: str, text: str) -> Measure:
    match = MEASURE_ARG_REGEX.fullmatch(argument)
    if match is None:
        raise TJASyntaxError(f'#MEASURE requires a value in the form "a/b" (got "{argument}")', rest=text)
    try:
        return Measure(int(match.group(1)), int(match.group(2)))
    except ValueError as e:
        raise TJASyntaxError(f"#MEASURE: {e}", rest=text) from e


def inner_track_command(text: str) -> tuple[TrackCommand, str]:
    """Recognize a command line that may appear between ``#START`` and ``#END``."""
    text = _skip_blank(text)
    command_match = COMMAND_REGEX.match(text)
    if command_match is None:
        raise TJASyntaxError(f"expected a command, got {_preview(text)}", rest=text)
    name, argument = command_match.group(1), command_match.group(2)
    if argument and not argument[0].isspace():
        raise TJASyntaxError(f"unrecognized command {_preview(text)}", rest=text)
    argument = argument.strip()

    command: TrackCommand
    match name:
        case "GOGOSTART":
            _no_argument(name, argument, text)
            command = GogoStart()
        case "GOGOEND":
            _no_argument(name, argument, text)
            command = GogoEnd()
        case "BARLINEON":
            _no_argument(name, argument, text)
            command = BarlineOn()
        case "BARLINEOFF":
            _no_argument(name, argument, text)
            command = BarlineOff()
        case "MEASURE":
            command = _measure_argument(argument, text)
        case "BPMCHANGE":
            bpm = _number_argument(name, argument, text)
            try:
                command = BPMChange(check_tempo(bpm))
            except ValueError as e:
                raise TJASyntaxError(f"#BPMCHANGE: {e}", rest=text) from e
        case "SCROLL":
            command = Scroll(_number_argument(name, argument, text))
        case "DELAY":
            seconds = _number_argument(name, argument, text)
            if seconds < 0:
                raise TJASyntaxError(f"#DELAY cannot be negative (got {argument})", rest=text)
            command = Delay(seconds)
        case "START" | "END":
            raise TJASyntaxError(f"unexpected #{name} {_preview(text)}", rest=text)
        case _:
            raise TJASyntaxError(f"unrecognized command #{name}", rest=text)

    return command, text[command_match.end() :]


def notes(text: str) -> tuple[tuple[NoteType | None, ...], str]:
    """
    Recognize a run of note digits.

    The run must be followed by a comma or a line end; the comma itself is left in the remainder.
    """
    text = _skip_blank(text)
    match = NOTES_REGEX.match(text)
    if match is None:
        raise TJASyntaxError(f"expected notes, got {_preview(text)}", rest=text)
    return tuple(NOTE_DIGIT_MAP[digit] for digit in match.group(0)), text[match.end() :]


def measure_end(text: str) -> tuple[EndMeasure, str]:
    """Recognize the comma closing a measure."""
    text = _skip_blank(text)
    if not text.startswith(","):
        raise TJASyntaxError(f"expected a comma, got {_preview(text)}", rest=text)
    return EndMeasure(), text[1:]


def note_track(text: str) -> tuple[tuple[NoteTrackEntry, ...], str]:
    """
    Recognize a full ``#START``...``#END`` block.

    The ``Start`` command is the first entry of the result; ``#END`` is consumed but not recorded. Every comma
    produces its own ``EndMeasure``, so a line holding a single comma is an empty measure.
    """
    start, rest = start_command(text)
    entries: list[NoteTrackEntry] = [Command(start)]
    while True:
        rest = _skip_blank(rest)
        if not rest:
            raise TJASyntaxError("note track is not closed by #END", rest=rest)
        if END_REGEX.match(rest) is not None:
            _, rest = end_command(rest)
            return tuple(entries), rest
        if rest.startswith("#"):
            command, rest = inner_track_command(rest)
            entries.append(Command(command))
        elif rest.startswith(","):
            end_measure, rest = measure_end(rest)
            entries.append(end_measure)
        else:
            group, rest = notes(rest)
            entries.append(Notes(group))


def _line_number(source: str, rest: str) -> int:
    return source.count("\n", 0, len(source) - len(rest)) + 1


def tja_file(text: str) -> tuple[ChartItem, ...]:
    """
    Recognize a whole (preprocessed) chart source.

    :returns: Metadata pairs and note tracks, in the order they appear.
    :raises TJASyntaxError: if any line matches neither form. No partial result is returned.
    """
    items: list[ChartItem] = []
    rest = text
    try:
        while rest := _skip_blank(rest):
            if rest.startswith("#"):
                entries, rest = note_track(rest)
                items.append(NoteTrack(entries))
            else:
                (key, value), rest = metadata_pair(rest)
                items.append(Metadata(key, value))
    except TJASyntaxError as e:
        if e.rest is None:
            raise
        # Leading blanks were skipped before the failing recognizer ran
        line = _line_number(text, _skip_blank(e.rest))
        raise TJASyntaxError(e.message, line=line) from None

    logger.debug(f"recognized {len(items)} chart items")
    return tuple(items)
