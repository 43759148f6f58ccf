from .comparators import (  # NOQA
    ISO8601,
    DatetimeComparator,
    KeyComparator,
    compare_by_datetime,
    parse_datetime,
    split_key,
)
from .errors import (  # NOQA
    LineSearchError,
    MalformedLineError,
    NoLineAtPositionError,
    SourceReadError,
    UnparsableKeyError,
)
from .linesearch import Comparator, Ordering, locate_line, search_line  # NOQA
from .sources import FileSource, RandomAccessSource, StringSource  # NOQA
