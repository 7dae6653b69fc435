"""Utility functions for the channel bridge."""

from .urns import TEL_SCHEME, normalize_number, tel_urn_for_country

__all__ = [
    "TEL_SCHEME",
    "normalize_number",
    "tel_urn_for_country",
]
