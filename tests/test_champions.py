# Area: Scrim Tests
"""Tests for the champion catalog."""

import http.client
from urllib.error import HTTPError, URLError

import pytest
from scrim_manager._scrim.champions import ChampionCatalog, ChampionInfo, StaticChampionCatalog


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def info(name):
    return ChampionInfo(id=name.replace(" ", ""), name=name, image_url=f"https://img/{name}.png")


class FakeFetcher:
    """Returns the queued lists in order; an exception in the queue is raised."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class TestChampionCatalog:
    """Tests for ChampionCatalog caching and lookups."""

    def test_first_use_fetches(self):
        """Test that the first read fetches and sorts the catalog."""
        fetcher = FakeFetcher([info("Zed"), info("Ahri")])
        catalog = ChampionCatalog(fetcher=fetcher, clock=FakeClock())
        assert [c.name for c in catalog.champions()] == ["Ahri", "Zed"]
        assert fetcher.calls == 1

    def test_snapshot_reused_within_ttl(self):
        """Test that a fresh snapshot is served without refetching."""
        clock = FakeClock()
        fetcher = FakeFetcher([info("Ahri")], [info("Ahri"), info("Zed")])
        catalog = ChampionCatalog(fetcher=fetcher, ttl_seconds=60, clock=clock)
        catalog.champions()
        clock.now += 59
        assert len(catalog.champions()) == 1
        assert fetcher.calls == 1

    def test_refresh_after_ttl(self):
        """Test that an expired snapshot is refetched."""
        clock = FakeClock()
        fetcher = FakeFetcher([info("Ahri")], [info("Ahri"), info("Zed")])
        catalog = ChampionCatalog(fetcher=fetcher, ttl_seconds=60, clock=clock)
        catalog.champions()
        clock.now += 61
        assert len(catalog.champions()) == 2
        assert fetcher.calls == 2

    def test_failed_refresh_keeps_snapshot(self):
        """Test that a failed refresh keeps serving the last snapshot."""
        clock = FakeClock()
        fetcher = FakeFetcher([info("Ahri")], URLError("offline"), URLError("offline"))
        catalog = ChampionCatalog(fetcher=fetcher, ttl_seconds=60, clock=clock)
        catalog.champions()
        clock.now += 61
        assert catalog.refresh() is False
        assert catalog.is_valid("ahri")

    def test_name_map_none_when_unavailable(self):
        """Test that no snapshot means no name map."""
        catalog = ChampionCatalog(fetcher=FakeFetcher(URLError("offline")), clock=FakeClock())
        assert catalog.name_map() is None

    def test_name_map_lowercases_keys(self):
        catalog = StaticChampionCatalog(["Lee Sin", "Ahri"])
        assert catalog.name_map() == {"lee sin": "Lee Sin", "ahri": "Ahri"}

    def test_lookup_is_substring_and_case_insensitive(self):
        """Test that lookup matches substrings regardless of case."""
        catalog = StaticChampionCatalog(["Lee Sin", "Leona", "Ahri"])
        assert [c.name for c in catalog.lookup("LE")] == ["Lee Sin", "Leona"]
        assert len(catalog.lookup()) == 3

    def test_get(self):
        catalog = StaticChampionCatalog(["Lee Sin"])
        assert catalog.get("  lee sin ").id == "LeeSin"
        assert catalog.get("Teemo") is None

    @pytest.mark.parametrize("error", [
        URLError("offline"),
        HTTPError("https://ddragon", 503, "Service Unavailable", None, None),
        TimeoutError("timed out"),
        ConnectionResetError("reset by peer"),
        http.client.IncompleteRead(b"{"),
        ValueError("bad JSON"),
        KeyError("data"),
    ])
    def test_fetch_failures_leave_catalog_unavailable(self, error):
        """Test that any network or format failure yields no name map."""
        catalog = ChampionCatalog(fetcher=FakeFetcher(error), clock=FakeClock())
        assert catalog.name_map() is None
