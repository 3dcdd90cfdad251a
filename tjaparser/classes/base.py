"""
Base, generic classes supporting other more specialized classes.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from fractions import Fraction

__all__ = [
    "Validateable",
    "MeasureFraction",
    "TJAParseError",
    "TJASyntaxError",
    "MissingRequiredMetadata",
    "MetadataNeeded",
    "InvalidMetadata",
]


class Validateable(ABC):
    """An abstract base class for classes that require validation."""

    @abstractmethod
    def validate(self):
        """
        Perform validation on the object.

        :raises ValueError: if any of the input is invalid.
        """
        pass


class TJAParseError(ValueError):
    """Base class for every error raised while reading chart source."""

    pass


class TJASyntaxError(TJAParseError):
    """
    Raised when a piece of chart source does not match any production of the grammar.

    Recognizers raise this with ``rest`` set to the unparsed input at the point of failure; the chart assembly
    step converts that into a 1-based ``line`` number and drops ``rest``.
    """

    def __init__(self, message: str, line: int | None = None, rest: str | None = None):
        self.message = message
        self.line = line
        self.rest = rest
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class MissingRequiredMetadata(TJAParseError):
    """Raised when a structurally valid chart lacks one of the required header keys."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f'required metadata "{key}" is missing')

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MissingRequiredMetadata):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash((type(self), self.key))


MetadataNeeded = MissingRequiredMetadata


class InvalidMetadata(TJAParseError):
    """Raised when a required header key holds a value that cannot be used."""

    def __init__(self, key: str, value: str):
        self.key = key
        self.value = value
        super().__init__(f'invalid value for metadata "{key}" (got {value!r})')


@dataclass(frozen=True)
class MeasureFraction(Validateable):
    """An immutable class that represents the length of a measure, relative to a 4/4 measure."""

    numerator: int = 4
    denominator: int = 4

    def __post_init__(self):
        self.validate()

    def validate(self):
        if self.numerator <= 0:
            raise ValueError(f"numerator must be positive (got {self.numerator})")
        if self.denominator <= 0:
            raise ValueError(f"denominator must be positive (got {self.denominator})")

    def as_fraction(self) -> Fraction:
        """
        Convert the measure to a fraction.

        :returns: A :class:`~fractions.Fraction` object.
        """
        return Fraction(self.numerator, self.denominator)
