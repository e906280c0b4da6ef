"""studylens: analytics engine for a personal study-tracking dashboard."""

from .consts import VERSION

__version__ = VERSION
