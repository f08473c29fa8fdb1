# Area: Scrim
"""
scrim_manager._scrim.champions — Champion Catalog
=================================================

Read-only champion reference data pulled from Riot's Data Dragon.
The catalog keeps the last snapshot and refreshes it when it is older
than the refresh interval. A failed refresh keeps the old snapshot;
staleness only affects which names are accepted, never roster safety.
"""

import http.client
import json
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional
from urllib.request import urlopen

logger = logging.getLogger("scrim_manager.scrim.champions")

DDRAGON_VERSIONS_URL = "https://ddragon.leagueoflegends.com/api/versions.json"
DDRAGON_CHAMPIONS_URL = "https://ddragon.leagueoflegends.com/cdn/{version}/data/{locale}/champion.json"
DDRAGON_IMAGE_URL = "https://ddragon.leagueoflegends.com/cdn/{version}/img/champion/{champion_id}.png"

DEFAULT_REFRESH_SECONDS = 60 * 60


@dataclass(frozen=True)
class ChampionInfo:
    id: str
    name: str
    image_url: str


def _get_json(url: str, timeout_s: int):
    with urlopen(url, timeout=timeout_s) as response:  # noqa: S310 fixed host
        return json.loads(response.read().decode("utf-8"))


def fetch_ddragon_champions(locale: str = "ko_KR", timeout_s: int = 10) -> List[ChampionInfo]:
    """
    Fetch the champion list of the latest Data Dragon release.

    Raises:
        OSError, http.client.HTTPException, ValueError: On network or
            format failures
    """
    versions = _get_json(DDRAGON_VERSIONS_URL, timeout_s)
    if not versions:
        raise ValueError("Data Dragon returned no versions")
    version = versions[0]
    payload = _get_json(DDRAGON_CHAMPIONS_URL.format(version=version, locale=locale), timeout_s)
    champions = payload.get("data", {})
    return [
        ChampionInfo(
            id=entry["id"],
            name=entry["name"],
            image_url=DDRAGON_IMAGE_URL.format(version=version, champion_id=entry["id"]),
        )
        for entry in champions.values()
    ]


class ChampionCatalog:
    """
    Champion catalog with check-and-refresh-if-stale caching.

    Attributes:
        ttl_seconds: Age after which the snapshot is refreshed
    """

    def __init__(
        self,
        fetcher: Optional[Callable[[], List[ChampionInfo]]] = None,
        ttl_seconds: int = DEFAULT_REFRESH_SECONDS,
        locale: str = "ko_KR",
        timeout_s: int = 10,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._fetcher = fetcher or (lambda: fetch_ddragon_champions(locale, timeout_s))
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._champions: List[ChampionInfo] = []
        self._by_name: Dict[str, ChampionInfo] = {}
        self._fetched_at: Optional[float] = None

    def is_stale(self) -> bool:
        if self._fetched_at is None or not self._champions:
            return True
        return self._clock() - self._fetched_at > self.ttl_seconds

    def refresh(self) -> bool:
        """
        Replace the snapshot with freshly fetched data.

        Returns:
            True if the snapshot was replaced, False if the fetch failed
        """
        try:
            champions = self._fetcher()
        except (OSError, http.client.HTTPException, ValueError, KeyError) as e:
            logger.error(f"Failed to fetch champion list: {e}")
            return False
        self._champions = sorted(champions, key=lambda c: c.name)
        self._by_name = {c.name.lower(): c for c in self._champions}
        self._fetched_at = self._clock()
        logger.info(f"Champion catalog refreshed ({len(self._champions)} champions)")
        return True

    def champions(self) -> List[ChampionInfo]:
        if self.is_stale():
            self.refresh()
        return list(self._champions)

    def lookup(self, query: str = "") -> List[ChampionInfo]:
        """Champions whose name contains ``query`` (case-insensitive), by name."""
        needle = query.strip().lower()
        return [c for c in self.champions() if needle in c.name.lower()]

    def get(self, name: str) -> Optional[ChampionInfo]:
        if self.is_stale():
            self.refresh()
        return self._by_name.get(name.strip().lower())

    def is_valid(self, name: str) -> bool:
        return self.get(name) is not None

    def name_map(self) -> Optional[Dict[str, str]]:
        """
        Lower-cased name -> display name, for membership checks.

        Returns:
            The mapping, or None if no snapshot could be loaded
        """
        if self.is_stale():
            self.refresh()
        if not self._champions:
            return None
        return {key: c.name for key, c in self._by_name.items()}


class StaticChampionCatalog(ChampionCatalog):
    """Catalog over a fixed list of names; never goes stale."""

    def __init__(self, names: Iterable[str]):
        champions = [
            ChampionInfo(id=name.replace(" ", ""), name=name, image_url="")
            for name in names
        ]
        super().__init__(fetcher=lambda: champions, ttl_seconds=float("inf"))
        self.refresh()
