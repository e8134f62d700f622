"""Enumerations for LocaleMap type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class Gender(StrEnum):
    """Grammatical gender selector for contextual messages.

    StrEnum provides automatic string conversion: str(Gender.FEMALE) == "female"
    The value doubles as the variant key suffix: common.contextual_female
    """

    MALE = "male"
    """Selects {key}_male"""

    FEMALE = "female"
    """Selects {key}_female"""

    NEUTRAL = "neutral"
    """Selects {key}_neutral"""


class LoaderType(StrEnum):
    """Transport used to fetch locale assets."""

    FILE_SYSTEM = "FileSystem"
    """Read {src}/{locale}/{base}.json from disk"""

    HTTP = "Http"
    """GET {src}/{locale}/{base}.json"""


class LoadState(StrEnum):
    """Lifecycle of one locale cache entry.

    NOT_LOADED -> LOADING -> LOADED | FAILED
    LOADED -> LOADING (reload) and FAILED -> LOADING (retry) are the only
    re-entrant edges. A cancelled load reverts to NOT_LOADED.
    """

    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class LoadStatus(StrEnum):
    """Outcome of a single asset fetch attempt."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ERROR = "error"


class MissingVariablePolicy(StrEnum):
    """Rendering of $name tokens with no supplied value."""

    LITERAL = "literal"
    """Keep the token as written, e.g. "Hello, $name" """

    BLANK = "blank"
    """Replace the token with an empty string"""


class Direction(StrEnum):
    """Script direction metadata from CLDR."""

    LEFT_TO_RIGHT = "ltr"
    RIGHT_TO_LEFT = "rtl"


__all__ = [
    "Direction",
    "Gender",
    "LoadState",
    "LoadStatus",
    "LoaderType",
    "MissingVariablePolicy",
]
