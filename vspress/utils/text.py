"""
Formatting helpers shared by the views
"""

import math
import re
from datetime import datetime, timezone
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
WORDS_PER_MINUTE = 200


def format_date(value: Optional[datetime]) -> str:
    """Format as e.g. 'Mar 4, 2024'; a missing timestamp shows today"""
    value = value or datetime.now(timezone.utc)
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def reading_time(content: str) -> int:
    """Minutes to read, never less than one"""
    words = len((content or "").split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def validate_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email or ""))


def initial(name: Optional[str], default: str = "U") -> str:
    return name[0].upper() if name else default
