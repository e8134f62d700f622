"""Country metadata introspection.

Python 3.13+. External dependency: Babel (CLDR locale data).
"""

from .iso import (
    Country,
    CountryCode,
    clear_iso_cache,
    get_country,
    is_valid_country_code,
    list_countries,
    parse_country,
)

__all__ = [
    "Country",
    "CountryCode",
    "clear_iso_cache",
    "get_country",
    "is_valid_country_code",
    "list_countries",
    "parse_country",
]
