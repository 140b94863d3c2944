# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
CelesTrak adapter: fetches live two-line element sets.

External dependencies (urllib) are confined to this layer.

Data source:
    CelesTrak GP API: https://celestrak.org/NORAD/elements/gp.php
    Groups: STATIONS, GPS-OPS, STARLINK, ONEWEB, ACTIVE, WEATHER, etc.
"""
import logging
import urllib.error
import urllib.request
from urllib.parse import quote

from orrery.domain.tracked_objects import TrackedObjectRecord, parse_tle_text

_log = logging.getLogger(__name__)

BASE_URL = "https://celestrak.org/NORAD/elements/gp.php"


class CelesTrakTleSource:
    """
    Fetches TLE text from CelesTrak's GP API and parses it into records.

    Rate limiting: CelesTrak updates at most every 2 hours.
    """

    def __init__(self, base_url: str = BASE_URL, timeout: int = 30):
        self._base_url = base_url
        self._timeout = timeout

    def fetch_group(self, group_name: str) -> list[TrackedObjectRecord]:
        url = f"{self._base_url}?GROUP={quote(group_name)}&FORMAT=TLE"
        return parse_tle_text(self._fetch_text(url))

    def fetch_by_name(self, name: str) -> list[TrackedObjectRecord]:
        url = f"{self._base_url}?NAME={quote(name)}&FORMAT=TLE"
        return parse_tle_text(self._fetch_text(url))

    def fetch_by_catnr(self, catalog_number: int) -> list[TrackedObjectRecord]:
        url = f"{self._base_url}?CATNR={catalog_number}&FORMAT=TLE"
        return parse_tle_text(self._fetch_text(url))

    def _fetch_text(self, url: str) -> str:
        req = urllib.request.Request(url, headers={"User-Agent": "orrery/0.1"})
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as response:
                text = response.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            raise ConnectionError(
                f"CelesTrak API error {e.code}: {e.reason}"
            ) from e
        except urllib.error.URLError as e:
            raise ConnectionError(
                f"CelesTrak connection failed: {e.reason}"
            ) from e
        if text.strip() == "No GP data found":
            _log.warning("CelesTrak returned no data for %s", url)
            return ""
        return text
