"""
Parser for TJA rhythm game charts.

:func:`parse_tja_file` turns chart source into a :class:`~tjaparser.classes.song.Song` whose courses hold notes
and barlines placed at absolute playback times.
"""
from .classes import (
    Course,
    Difficulty,
    InvalidMetadata,
    MetadataNeeded,
    MissingRequiredMetadata,
    NoteType,
    Player,
    Song,
    TimedBarline,
    TimedNote,
    TJAParseError,
    TJASyntaxError,
)

from .parser import (
    TJAParser,
    parse_tja_file,
)
