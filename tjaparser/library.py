"""
Discovery of songs on disk.

A song library is a directory holding one sub-directory per song. Each song directory contains a chart named after
the directory (``<name>/<name>.tja``) and the audio file the chart refers to.
"""
import logging
import os

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from .classes.base import TJAParseError
from .classes.song import Song
from .parser.tja import TJAParser
from .utils import clamp

__all__ = [
    "SONG_FILE_ENCODING",
    "get_chart_path",
    "read_song_dir",
    "read_song_list_dir",
]

SONG_FILE_ENCODING = "utf-8-sig"
MAX_WORKERS = 32

logger = logging.getLogger(__name__)


def get_chart_path(path: str | os.PathLike) -> Path:
    """Return the path of the chart inside a song directory."""
    path = Path(path)
    return path / f"{path.name}.tja"


def read_song_dir(path: str | os.PathLike, encoding: str = SONG_FILE_ENCODING) -> Song:
    """
    Read the song stored in a directory.

    The audio filename of the returned song is resolved relative to the directory.

    :raises OSError: if the chart cannot be read.
    :raises TJAParseError: if the chart is malformed.
    """
    path = Path(path)
    with get_chart_path(path).open("r", encoding=encoding) as f:
        song = TJAParser().parse(f)
    song.audio_filename = str(path / song.audio_filename)
    return song


def _try_read_song_dir(path: Path, encoding: str) -> Song | None:
    try:
        return read_song_dir(path, encoding)
    except (OSError, UnicodeDecodeError, TJAParseError) as e:
        logger.error(f"error encountered while trying to read song at directory {path}: {e}")
        return None


def read_song_list_dir(
    path: str | os.PathLike, *, encoding: str = SONG_FILE_ENCODING, workers: int = 1
) -> list[Song]:
    """
    Read every song in a library directory.

    Song directories that cannot be read are logged and skipped.

    :param path: The library directory.
    :param encoding: Text encoding of the chart files.
    :param workers: Number of charts parsed concurrently.
    :returns: The songs, ordered by directory name.
    :raises OSError: if the library directory itself cannot be listed.
    """
    song_dirs = sorted(p for p in Path(path).iterdir() if p.is_dir())
    workers = clamp(workers, 1, MAX_WORKERS)

    if workers == 1:
        results = [_try_read_song_dir(p, encoding) for p in song_dirs]
    else:
        with ThreadPoolExecutor(max_workers=workers) as ex:
            results = list(ex.map(_try_read_song_dir, song_dirs, [encoding] * len(song_dirs)))

    songs = [song for song in results if song is not None]
    logger.info(f"loaded {len(songs)} of {len(song_dirs)} songs from {path}")
    return songs
