from .base import (
    InvalidMetadata,
    MeasureFraction,
    MetadataNeeded,
    MissingRequiredMetadata,
    TJAParseError,
    TJASyntaxError,
)

from .chart import (
    Difficulty,
    TimedBarline,
    TimedNote,
)

from .enums import (
    Course,
    NoteType,
    Player,
)

from .items import (
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

from .song import (
    Song
)
