"""Timestamp envelope with timezone and optional location.

Mirrors the MCP time server format::

    {"datetime": "2026-03-01T09:30:00-05:00", "day_of_week": "Sunday",
     "is_dst": false, "timezone": "America/New_York"}
"""

from __future__ import annotations

import datetime
import json
import logging
import zoneinfo
from typing import Any

import httpx
import pycountry

logger = logging.getLogger("memkit.builder.timestamp")


def _zone(timezone: str | None) -> datetime.tzinfo | None:
    """The named zone, or ``None`` when *timezone* is empty or unknown."""
    if not timezone:
        return None
    try:
        return zoneinfo.ZoneInfo(timezone)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError, OSError):
        # A bare region such as "America" can surface as IsADirectoryError
        logger.debug("Unknown timezone %r, using local time", timezone)
        return None


def generate(timezone: str | None = None, now: datetime.datetime | None = None) -> dict[str, Any]:
    """Return the timestamp dict for *timezone*.

    An empty or unknown *timezone* falls back to the local zone, which is
    then reported by its own name.
    """
    tz = _zone(timezone)
    if now is None:
        now = datetime.datetime.now(tz=datetime.UTC)
    if tz is None:
        timezone = None
        local = now.astimezone()
    else:
        local = now.astimezone(tz)
    dst = local.dst()
    return {
        "datetime": local.replace(microsecond=0).isoformat(),
        "day_of_week": local.strftime("%A"),
        "is_dst": bool(dst),
        "timezone": timezone or local.tzname(),
    }


def parse_geolocation(payload: str) -> dict[str, str]:
    """Parse a JSON (or single-quoted pseudo-JSON) location payload."""
    location = json.loads(payload.replace("'", '"'))
    return {
        "city": location.get("city"),
        "country": location.get("country"),
        "timezone": location.get("timezone"),
    }


def country_name(code: str | None) -> str | None:
    """English display name for an ISO 3166 alpha-2 *code*.

    Unknown codes are returned unchanged.
    """
    if not code:
        return code
    try:
        country = pycountry.countries.get(alpha_2=code)
    except LookupError:
        country = None
    if country is None:
        return code
    return getattr(country, "common_name", None) or country.name


def fetch_geolocation(
    payload: str | None,
    service_url: str,
    timeout: float = 2.0,
) -> dict[str, str]:
    """Return ``{city, country, timezone}``; ``{}`` on any failure.

    An explicit *payload* wins over the lookup service and is taken as is;
    the service's ISO country code is expanded to its English name.
    """
    try:
        if payload:
            return parse_geolocation(payload)
        resp = httpx.get(service_url, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
        return {
            "city": data.get("city"),
            "country": country_name(data.get("country")),
            "timezone": data.get("timezone"),
        }
    except (httpx.HTTPError, ValueError, AttributeError):
        logger.debug("Geolocation lookup failed", exc_info=True)
        return {}


def envelope(location: dict[str, str], now: datetime.datetime | None = None) -> dict[str, Any]:
    """Timestamp for *location*, with city and country when known."""
    stamp = generate(location.get("timezone"), now)
    if location.get("city"):
        stamp["city"] = location["city"]
    if location.get("country"):
        stamp["country"] = location["country"]
    return stamp
