import dataclasses
import logging

from collections.abc import Iterable
from decimal import Decimal
from pathlib import Path
from typing import TextIO

from .base import Parser
from .grammar import preprocess_tja_file, tja_file
from .timing import resolve_note_track
from ..classes.base import InvalidMetadata, MissingRequiredMetadata
from ..classes.chart import Difficulty
from ..classes.enums import Course, Player
from ..classes.items import ChartItem, Metadata, NoteTrack
from ..classes.song import Song
from ..utils import check_tempo, parse_decimal, parse_int_list

__all__ = [
    "REQUIRED_METADATA",
    "validate_metadata",
    "parse_tja_file",
    "TJAParser",
]

REQUIRED_METADATA = ("TITLE", "BPM", "WAVE")
"""Header keys every chart must define, in the order they are checked."""

DEFAULT_COURSE = Course.ONI

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class _CourseContext:
    """
    Course-specific header values, applying to the note tracks that follow them.

    ``LEVEL`` and ``BALLOON`` belong to one course: every ``COURSE`` line after the first starts over from the
    defaults. Values given before the first ``COURSE`` line apply to it.
    """

    course: Course = DEFAULT_COURSE
    level: int = 0
    balloons: list[int] = dataclasses.field(default_factory=list)
    course_seen: bool = False

    def select_course(self, course: Course) -> None:
        if self.course_seen:
            self.level = 0
            self.balloons = []
        self.course = course
        self.course_seen = True


def validate_metadata(items: Iterable[ChartItem]) -> dict[str, str]:
    """
    Collect the header of a chart and check that every required key is present.

    A key that appears more than once keeps its last value.

    :returns: The header mapping.
    :raises MissingRequiredMetadata: naming the first required key that is absent or empty.
    """
    header: dict[str, str] = {}
    for item in items:
        if isinstance(item, Metadata):
            header[item.key] = item.value

    for key in REQUIRED_METADATA:
        if not header.get(key):
            raise MissingRequiredMetadata(key)

    return header


def _parse_bpm(value: str) -> Decimal:
    try:
        return check_tempo(parse_decimal(value))
    except ValueError as e:
        raise InvalidMetadata("BPM", value) from e


def _parse_seconds(header: dict[str, str], key: str) -> float:
    if key not in header or not header[key]:
        return 0.0
    try:
        return float(parse_decimal(header[key]))
    except ValueError as e:
        logger.warning(f"{key}: {e}")
        return 0.0


def _build_song(header: dict[str, str]) -> Song:
    return Song(
        title=header["TITLE"],
        subtitle=header.get("SUBTITLE", "").removeprefix("--"),
        bpm=_parse_bpm(header["BPM"]),
        audio_filename=header["WAVE"],
        demo_start_offset=_parse_seconds(header, "DEMOSTART"),
        offset=_parse_seconds(header, "OFFSET"),
        metadata=header,
    )


def _apply_course_metadata(context: _CourseContext, item: Metadata) -> None:
    try:
        match item.key:
            case "COURSE":
                context.select_course(Course.from_string(item.value))
            case "LEVEL":
                context.level = int(item.value)
            case "BALLOON":
                context.balloons = parse_int_list(item.value)
            case _:
                # Everything else applies to the whole song and is read from the header mapping
                pass
    except ValueError as e:
        logger.warning(f"ignoring {item.key}:{item.value} ({e})")


def _add_note_track(song: Song, context: _CourseContext, item: NoteTrack) -> None:
    for result in resolve_note_track(item.entries, song.bpm):
        player_two = result.player == Player.PLAYER2
        if song.get_difficulty(context.course, player_two=player_two) is not None:
            logger.warning(f"course {context.course} is charted more than once, keeping the last chart")
        difficulty = Difficulty(
            course=context.course,
            star_level=context.level,
            notes=result.notes,
            barlines=result.barlines,
            balloons=list(context.balloons),
        )
        song.set_difficulty(difficulty, player_two=player_two)
        logger.info(
            f"{song.title}: {context.course} level {context.level} "
            f"({len(difficulty.notes)} notes, {len(difficulty.barlines)} barlines)"
        )


def parse_tja_file(text: str) -> Song:
    """
    Parse a chart source into a song with every course resolved to timed notes.

    :param text: The full chart source.
    :raises TJASyntaxError: if the source does not follow the grammar.
    :raises MissingRequiredMetadata: if ``TITLE``, ``BPM`` or ``WAVE`` is missing.
    :raises InvalidMetadata: if ``BPM`` is not a positive number.
    """
    items = tja_file(preprocess_tja_file(text))
    header = validate_metadata(items)
    song = _build_song(header)

    context = _CourseContext()
    for item in items:
        match item:
            case Metadata():
                _apply_course_metadata(context, item)
            case NoteTrack():
                _add_note_track(song, context, item)
            case _:
                raise TypeError(f"unexpected chart item {item!r}")

    if not song.available_courses and not any(song.player_two):
        logger.warning(f"{song.title}: chart has no note track")
    return song


class TJAParser(Parser):
    """Reads TJA chart files."""

    def parse(self, f: TextIO) -> Song:
        name = getattr(f, "name", None)
        self._file_path = Path(name).resolve() if isinstance(name, str) else None
        return parse_tja_file(f.read())
