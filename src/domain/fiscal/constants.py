"""Fiscal-domain constants."""

import re
from typing import Final

# Percentage bounds, inclusive unless stated otherwise
MIN_RATE: Final[float] = 0.0
MAX_RATE: Final[float] = 100.0

# Harmonized System code: 4-6 digits, optionally "." and 2-4 more digits
HARMONIZED_CODE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"\d{4,6}(?:\.\d{2,4})?", re.ASCII
)

PERCENT_DIVISOR: Final[float] = 100.0
