"""
Utility modules for the GroupTherapy backend.
"""
from grouptherapy.utils.time import utcnow, ensure_utc

__all__ = [
    "utcnow",
    "ensure_utc",
]
