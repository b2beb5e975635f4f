"""Configuration constants for POD order reconciliation."""

import json
import logging
from datetime import timedelta
from pathlib import Path

from .models import CustomerProfile

logger = logging.getLogger(__name__)

# Default locations
DEFAULT_REPOSITORY_PATH = Path("data/data.json")
DEFAULT_OUTPUT_DIR = Path("data/exports")

# Upload restrictions
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
ALLOWED_EXTENSIONS = (".xlsx", ".xls", ".csv")
ALLOWED_MIME_TYPES = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-excel",
    "text/csv",
    "application/csv",
}

# Known upload extensions, consulted before the platform MIME database
EXTENSION_MIME_TYPES = {
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xls": "application/vnd.ms-excel",
    ".csv": "text/csv",
}

# Delimiters tried when sniffing uploaded CSV files
CSV_DELIMITERS = ",\t|;"

# Text fields taken from repository rows are cut to this length
MAX_TEXT_LENGTH = 200

# Accepted order quantity range (anything else becomes 0)
MIN_QUANTITY = 1
MAX_QUANTITY = 10000

# ISBN digit counts accepted as identifiers (shorter ones are zero-padded)
ISBN_MIN_DIGITS = 10
ISBN_LENGTH = 13

# Repository defaults and order-line sentinels
DEFAULT_STATUS = "POD Ready"
DEFAULT_TITLE = "No title available"
NOT_FOUND_DESCRIPTION = "Not Found"
NOT_AVAILABLE_STATUS = "Not Available"
UNSPECIFIED_PAPER = "Not specified"

# Repository edit sessions expire after this long
EDIT_SESSION_TTL = timedelta(minutes=30)

# HTTP settings for remote repository data
CONNECT_TIMEOUT = 30
READ_TIMEOUT = 120

# Printer customer profile written into every export header
DEFAULT_CUSTOMER_PROFILE = CustomerProfile(
    name="Clays Ltd",
    type="Clays POD",
    street="Popson Street",
    road="",
    city="Bungay",
    region="Suffolk",
    country="UK",
    postcode="NR35 1ED",
    country_code="GB",
    phone="01986 893 211",
)


def load_customer_profile(profile_path: str | Path) -> CustomerProfile:
    """
    Load a customer profile from a JSON file.

    Accepts either a flat object or the nested layout used by the printer
    configuration (``{"name": ..., "address": {"street": ...}, ...}``).

    Args:
        profile_path: Path to the JSON profile

    Returns:
        CustomerProfile with a validated ISO 3166-1 alpha-2 country code

    Raises:
        ValueError: If the profile has no name or an unknown country code
    """
    # Normalizers read this module's constants, so import lazily
    from .normalizers import normalize_country

    path = Path(profile_path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    address = data.get("address", {})

    def pick(key: str, *aliases: str) -> str:
        for name in (key, *aliases):
            value = address.get(name, data.get(name))
            if value:
                return str(value).strip()
        return ""

    name = pick("name", "companyName")
    if not name:
        raise ValueError(f"Customer profile has no name: {path}")

    raw_code = pick("countryCode", "country_code") or pick("country")
    country_code = normalize_country(raw_code)
    if not country_code:
        raise ValueError(f"Unknown country code in customer profile: {raw_code!r}")

    profile = CustomerProfile(
        name=name,
        type=pick("type"),
        street=pick("street"),
        road=pick("road"),
        city=pick("city"),
        region=pick("region"),
        country=pick("country"),
        postcode=pick("postcode"),
        country_code=country_code,
        phone=pick("phone"),
    )
    logger.info(f"Loaded customer profile for {profile.name} from: {path}")
    return profile
