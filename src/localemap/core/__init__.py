"""Core value types shared across localization and runtime layers.

Python 3.13+.
"""

from .locale import Locale, parse_locale

__all__ = ["Locale", "parse_locale"]
