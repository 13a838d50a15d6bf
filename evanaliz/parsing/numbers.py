"""Locale-ambiguous number and coordinate parsing.

Handles Turkish ("3.500.000,50") and Western ("3,500,000.50") grouping plus
the Lira markers seen on listing screens. The separator rules below are
order-dependent and deliberately ambiguous ("1.234" reads as 1234); the
discriminator's range filters rely on exactly this behaviour.
"""

from __future__ import annotations

import logging
import re

from evanaliz.config import ParserConfig
from evanaliz.models import Coordinate

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = ParserConfig()

_NON_NUMERIC = re.compile(r"[^0-9.,]")

# Google Maps style: ".../@40.8736,29.3064,17z"
_URL_COORD = re.compile(r"@(-?\d{1,3}(?:\.\d+)?),\s*(-?\d{1,3}(?:\.\d+)?)")

# 40.8736°N 29.3064°E
_DECIMAL_DEGREES = re.compile(
    r"(\d{1,3}(?:\.\d+)?)\s*°\s*([NS])[\s,]+(\d{1,3}(?:\.\d+)?)\s*°\s*([EW])",
    re.IGNORECASE,
)

# 40.8736, 29.3064
_PLAIN_PAIR = re.compile(r"(?<![\d.,])(-?\d{1,2}\.\d+)\s*,\s*(-?\d{1,3}\.\d+)(?![\d.,])")

# 40°52'25.0"N (one hemisphere part)
_DMS_PART = re.compile(
    r"(\d{1,3})\s*°\s*(\d{1,2})\s*['′]\s*(\d{1,2}(?:\.\d+)?)\s*(?:\"|″|'')?\s*([NSEW])",
    re.IGNORECASE,
)


def parse_number(text: str | None, config: ParserConfig | None = None) -> float | None:
    """Parse a currency/number string such as "3.500.000 TL" or "₺25.000".

    Returns None when nothing numeric is left after cleaning or when the
    cleaned string is still not a valid number.
    """
    if text is None or not text.strip():
        return None
    cfg = config or _DEFAULT_CONFIG

    cleaned = text
    for marker in cfg.currency_markers:
        cleaned = cleaned.replace(marker, "")
    cleaned = cleaned.replace(" ", "").strip()
    cleaned = _NON_NUMERIC.sub("", cleaned)
    if not cleaned:
        return None

    dots = cleaned.count(".")
    commas = cleaned.count(",")
    last_dot = cleaned.rfind(".")
    last_comma = cleaned.rfind(",")

    if dots > 1 and commas == 0:
        # 3.500.000 -> all dots group thousands
        cleaned = cleaned.replace(".", "")
    elif dots > 0 and commas == 1 and last_comma > last_dot:
        # 3.500.000,50 -> Turkish: dots group, comma is the decimal point
        cleaned = cleaned.replace(".", "").replace(",", ".")
    elif commas > 1 and dots == 0:
        # 3,500,000 -> all commas group thousands
        cleaned = cleaned.replace(",", "")
    elif commas > 0 and dots == 1 and last_dot > last_comma:
        # 25,000.50 -> Western: commas group, dot is the decimal point
        cleaned = cleaned.replace(",", "")
    elif dots == 1 and commas == 0:
        # 25.000 groups thousands, 25.5 is a decimal
        if len(cleaned) - last_dot - 1 == 3:
            cleaned = cleaned.replace(".", "")
    elif commas == 1 and dots == 0:
        # 1,5 is a decimal, 1,500 groups thousands
        if len(cleaned) - last_comma - 1 <= 2:
            cleaned = cleaned.replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")

    try:
        return float(cleaned)
    except ValueError:
        logger.debug("Unparseable numeric residue %r from %r", cleaned, text)
        return None


def parse_all(texts: list[str], config: ParserConfig | None = None) -> list[float]:
    """Parse every text, dropping failures and keeping the original order."""
    values: list[float] = []
    for text in texts:
        value = parse_number(text, config)
        if value is not None:
            values.append(value)
    return values


def _valid(lat: float, lon: float) -> bool:
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0


def _from_url(text: str) -> Coordinate | None:
    m = _URL_COORD.search(text)
    if not m:
        return None
    lat, lon = float(m.group(1)), float(m.group(2))
    return Coordinate(lat=lat, lon=lon) if _valid(lat, lon) else None


def _from_decimal_degrees(text: str) -> Coordinate | None:
    m = _DECIMAL_DEGREES.search(text)
    if not m:
        return None
    lat = float(m.group(1))
    lon = float(m.group(3))
    if m.group(2).upper() == "S":
        lat = -lat
    if m.group(4).upper() == "W":
        lon = -lon
    return Coordinate(lat=lat, lon=lon) if _valid(lat, lon) else None


def _from_plain_pair(text: str, cfg: ParserConfig) -> Coordinate | None:
    m = _PLAIN_PAIR.search(text)
    if not m:
        return None
    lat, lon = float(m.group(1)), float(m.group(2))
    if not (cfg.min_latitude <= lat <= cfg.max_latitude):
        return None
    if not (cfg.min_longitude <= lon <= cfg.max_longitude):
        return None
    return Coordinate(lat=lat, lon=lon)


def _dms_to_decimal(degrees: str, minutes: str, seconds: str, hemisphere: str) -> float:
    value = float(degrees) + float(minutes) / 60 + float(seconds) / 3600
    if hemisphere.upper() in ("S", "W"):
        value = -value
    return value


def _from_dms(text: str) -> Coordinate | None:
    lat: float | None = None
    lon: float | None = None
    for m in _DMS_PART.finditer(text):
        hemisphere = m.group(4).upper()
        value = _dms_to_decimal(m.group(1), m.group(2), m.group(3), hemisphere)
        if hemisphere in ("N", "S") and lat is None:
            lat = value
        elif hemisphere in ("E", "W") and lon is None:
            lon = value
    if lat is None or lon is None:
        return None
    return Coordinate(lat=lat, lon=lon) if _valid(lat, lon) else None


def parse_coordinates(text: str | None, config: ParserConfig | None = None) -> Coordinate | None:
    """Parse a geographic coordinate from screen text.

    Tries, in order: a map URL ("@lat,lon"), decimal degrees with hemisphere
    letters, a bare "lat, lon" pair inside the regional bounding box, and
    degrees-minutes-seconds. The first format that matches wins.
    """
    if text is None or not text.strip():
        return None
    cfg = config or _DEFAULT_CONFIG

    return (
        _from_url(text)
        or _from_decimal_degrees(text)
        or _from_plain_pair(text, cfg)
        or _from_dms(text)
    )
