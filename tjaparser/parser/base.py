"""
Abstract base classes for parsers.
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TextIO

from ..classes.song import Song

__all__ = [
    "Parser",
]


class Parser(ABC):
    """
    An abstract base class for parsers that read a specific format.
    """

    _file_path: Path | None = None

    @abstractmethod
    def parse(self, f: TextIO) -> Song:
        """Parse a file, producing a song along with all of its charts."""
        pass

    @property
    def file_path(self) -> Path | None:
        """Path to the file last parsed, if it was read from disk."""
        return self._file_path
