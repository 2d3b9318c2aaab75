"""CelesTrak element feed client.

Fetches public two-line element groups and hands them over as raw
:class:`ElementRecord` objects; decoding is left to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import requests

from orbwatch.core.tle import ElementRecord, parse_records

logger = logging.getLogger(__name__)

GROUPS: dict[str, str] = {
    "stations": "stations",
    "starlink": "starlink",
    "active": "active",
    "weather": "weather",
    "gps": "gps-ops",
}
"""Supported group names mapped to CelesTrak ``GROUP`` query values."""

DEFAULT_GROUP = "stations"
DEFAULT_LIMIT = 50


@dataclass
class CelestrakClient:
    """Client for the CelesTrak GP element service.

    Attributes:
        timeout: Request timeout in seconds.
    """

    timeout: float = 30.0
    _session: requests.Session = field(default_factory=requests.Session, repr=False)

    BASE_URL = "https://celestrak.org/NORAD/elements/gp.php"

    def group_url(self, group: str) -> str:
        """URL of a group's TLE listing. Unknown groups fall back to ``stations``."""
        if group not in GROUPS:
            logger.warning("Unknown CelesTrak group %r, using %r", group, DEFAULT_GROUP)
            group = DEFAULT_GROUP
        return f"{self.BASE_URL}?GROUP={GROUPS[group]}&FORMAT=tle"

    def fetch_group(self, group: str = DEFAULT_GROUP, *, limit: int | None = DEFAULT_LIMIT) -> list[ElementRecord]:
        """Fetch the element records of a satellite group.

        Args:
            group: One of ``stations``, ``starlink``, ``active``, ``weather``, ``gps``.
            limit: Maximum number of records returned; None for all.

        Returns:
            Raw element records in feed order.

        Raises:
            requests.HTTPError: If the request fails.
        """
        response = self._session.get(self.group_url(group), timeout=self.timeout)
        response.raise_for_status()

        if not response.text.strip():
            return []

        records = parse_records(response.text)
        if limit is not None:
            records = records[:limit]
        logger.debug("Fetched %d records for group %r", len(records), group)
        return records
