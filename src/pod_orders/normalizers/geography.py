"""Country normalization to ISO 3166-1 alpha-2 codes."""

from functools import cache
from typing import Optional

import pycountry

# Names printers commonly use that are not ISO names or codes
_COUNTRY_ALIASES = {
    "uk": "GB",
    "england": "GB",
    "scotland": "GB",
    "wales": "GB",
    "northern ireland": "GB",
    "usa": "US",
}


def normalize_country(country: Optional[str]) -> Optional[str]:
    """
    Normalize a country name or code to an ISO 3166-1 alpha-2 code.

    Handles:
    - ISO 2-letter codes: "gb", "GB" -> "GB"
    - ISO 3-letter codes: "GBR" -> "GB"
    - Names and printer shorthands: "United Kingdom", "UK" -> "GB"

    Args:
        country: Country name or code

    Returns:
        Two-letter code (uppercase) or None if not recognized
    """
    if not country:
        return None

    country = str(country).strip()
    if not country:
        return None

    return _lookup_country_code(country.lower())


@cache
def _lookup_country_code(country: str) -> Optional[str]:
    """Look up the alpha-2 code for a lowercased, stripped country string."""
    if country in _COUNTRY_ALIASES:
        return _COUNTRY_ALIASES[country]

    # Exact match on alpha-2, alpha-3, name or official name
    try:
        return pycountry.countries.lookup(country).alpha_2
    except LookupError:
        pass

    try:
        results = pycountry.countries.search_fuzzy(country)
    except LookupError:
        return None
    return results[0].alpha_2 if results else None
