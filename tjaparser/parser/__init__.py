from .base import (
    Parser,
)

from .tja import (
    TJAParser,
    parse_tja_file,
    validate_metadata,
)
