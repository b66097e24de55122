from unittest.mock import MagicMock

import pytest
import requests

from teleka.api.models import RecentPlace, Suggestion
from teleka.client.location import StaticGeolocation, resolve_position
from teleka.client.providers import (
    NEARBY_FAILED,
    NETWORK_ERROR,
    NO_MATCHES,
    NO_NEARBY,
    NearbyPlacesProvider,
    NominatimProvider,
    ProxyClient,
    SuggestionProviderChain,
)

NOMINATIM = {
    "search_url": "https://nominatim.example.org/search",
    "user_agent": "teleka-tests",
    "country": "ug",
    "limit": 6,
    "timeout_sec": 2,
}

PREDICTION = {
    "place_id": "gp-1",
    "description": "Kampala Road, Kampala, Uganda",
    "structured_formatting": {"main_text": "Kampala Road", "secondary_text": "Kampala, Uganda"},
    "types": ["route"],
}


@pytest.fixture
def proxy():
    p = MagicMock()
    p.autocomplete.return_value = {"status": "OK", "predictions": [PREDICTION]}
    return p


@pytest.fixture
def fallback():
    f = MagicMock()
    f.search.return_value = []
    return f


@pytest.fixture
def chain(proxy, fallback, recent_cache):
    return SuggestionProviderChain(proxy, fallback, recent_cache)


def test_primary_results_with_recent_first(chain, recent_cache, fallback):
    recent_cache.save(RecentPlace(place_id="r1", description="Kampala Serena Hotel", main_text="Serena"))

    results = chain.suggest("kampala", "tok")

    assert [s.source for s in results] == ["recent", "remote"]
    assert results[0].place_id == "r1"
    assert results[1].main_text == "Kampala Road"
    fallback.search.assert_not_called()


def test_empty_primary_uses_fallback(chain, proxy, fallback):
    proxy.autocomplete.return_value = {"status": "ZERO_RESULTS", "predictions": []}
    fallback.search.return_value = [Suggestion(place_id="osm:1", description="Gulu", source="fallback")]

    results = chain.suggest("gulu", "tok")

    fallback.search.assert_called_once_with("gulu")
    assert [s.place_id for s in results] == ["osm:1"]


def test_error_status_uses_fallback(chain, proxy, fallback):
    proxy.autocomplete.return_value = {"status": "REQUEST_DENIED", "error_message": "legacy API disabled"}
    fallback.search.return_value = [Suggestion(place_id="osm:2", description="Jinja", source="fallback")]
    assert chain.suggest("jinja", "tok")[0].place_id == "osm:2"


def test_primary_network_failure_uses_fallback(chain, proxy, fallback):
    proxy.autocomplete.side_effect = requests.ConnectionError("offline")
    fallback.search.return_value = [Suggestion(place_id="osm:3", description="Mbale", source="fallback")]
    assert chain.suggest("mbale", "tok")[0].place_id == "osm:3"


def test_both_empty_gives_single_placeholder(chain, proxy):
    proxy.autocomplete.return_value = {"status": "ZERO_RESULTS", "predictions": []}
    results = chain.suggest("nowhere", "tok")
    assert len(results) == 1
    assert results[0].is_error
    assert results[0].message == NO_MATCHES


def test_both_empty_returns_recent_matches(chain, proxy, recent_cache):
    proxy.autocomplete.return_value = {"predictions": []}
    recent_cache.save(RecentPlace(place_id="r1", description="Nowhere Bar", main_text="Nowhere"))
    results = chain.suggest("nowhere", "tok")
    assert [s.place_id for s in results] == ["r1"]


def test_total_failure_gives_network_placeholder(chain, proxy, fallback):
    proxy.autocomplete.side_effect = requests.ConnectionError("offline")
    fallback.search.side_effect = requests.ConnectionError("offline")
    results = chain.suggest("kampala", "tok")
    assert len(results) == 1
    assert results[0].message == NETWORK_ERROR


def test_nominatim_maps_results(make_response):
    session = MagicMock()
    session.get.return_value = make_response([
        {"osm_id": 42, "display_name": "Ntinda, Kampala, Central Region, Uganda", "type": "suburb"},
        {"osm_id": 43, "display_name": "Ntinda Road"},
    ])
    results = NominatimProvider(NOMINATIM, session=session).search("ntinda")

    params = session.get.call_args.kwargs["params"]
    assert params["countrycodes"] == "ug"
    assert params["limit"] == 6
    assert session.get.call_args.kwargs["headers"]["User-Agent"] == "teleka-tests"

    assert results[0].place_id == "osm:42"
    assert results[0].main_text == "Ntinda"
    assert results[0].secondary_text == "Kampala, Central Region, Uganda"
    assert results[0].types == ["suburb"]
    assert results[0].is_fallback
    assert results[1].types == []
    assert results[1].secondary_text == ""


def test_nearby_maps_results(proxy):
    proxy.nearby.return_value = {"results": [
        {"place_id": "n1", "name": "Acacia Mall", "vicinity": "Kisementi", "types": ["shopping_mall"]},
    ]}
    provider = NearbyPlacesProvider(proxy, StaticGeolocation(0.33, 32.6), fallback_position=(0.0, 0.0))

    results = provider.nearby("tok")

    proxy.nearby.assert_called_once_with((0.33, 32.6), "tok")
    assert results[0].main_text == "Acacia Mall"
    assert results[0].secondary_text == "Kisementi"
    assert results[0].types == ["shopping_mall"]


def test_nearby_without_geolocation_uses_fallback_position(proxy):
    proxy.nearby.return_value = {"results": []}
    provider = NearbyPlacesProvider(proxy, None, fallback_position=(0.3476, 32.5825))

    results = provider.nearby("tok")

    proxy.nearby.assert_called_once_with((0.3476, 32.5825), "tok")
    assert len(results) == 1
    assert results[0].message == NO_NEARBY


def test_nearby_failure_placeholder(proxy):
    proxy.nearby.side_effect = requests.Timeout("slow")
    results = NearbyPlacesProvider(proxy, None, fallback_position=(0.0, 0.0)).nearby("tok")
    assert [r.message for r in results] == [NEARBY_FAILED]


def test_denied_geolocation_falls_back():
    def denied():
        raise PermissionError("user denied")

    assert resolve_position(denied, (1.0, 2.0), timeout=1) == (1.0, 2.0)


def test_slow_geolocation_times_out():
    import threading

    release = threading.Event()

    def hangs():
        release.wait(5)
        return (9.0, 9.0)

    try:
        assert resolve_position(hangs, (1.0, 2.0), timeout=0.05) == (1.0, 2.0)
    finally:
        release.set()


def server_error_session():
    """Session whose every GET returns the proxy's own 500 upstream-failure body."""
    resp = MagicMock(status_code=500)
    resp.json.return_value = {"status": "UNKNOWN_ERROR", "error_message": "Maps request failed: offline"}
    resp.raise_for_status.side_effect = requests.HTTPError("500 Server Error", response=resp)
    session = MagicMock()
    session.get.return_value = resp
    return session


def test_proxy_client_raises_on_server_error():
    client = ProxyClient(base_url="http://proxy.test", session=server_error_session(), timeout=1)
    with pytest.raises(requests.HTTPError):
        client.autocomplete("kam", "tok")


def test_upstream_outage_and_fallback_outage_gives_network_placeholder(fallback, recent_cache):
    client = ProxyClient(base_url="http://proxy.test", session=server_error_session(), timeout=1)
    fallback.search.side_effect = requests.ConnectionError("offline")

    results = SuggestionProviderChain(client, fallback, recent_cache).suggest("kam", "tok")

    assert [r.message for r in results] == [NETWORK_ERROR]


def test_nearby_upstream_outage_gives_failure_placeholder():
    client = ProxyClient(base_url="http://proxy.test", session=server_error_session(), timeout=1)
    results = NearbyPlacesProvider(client, None, fallback_position=(0.0, 0.0)).nearby("tok")
    assert [r.message for r in results] == [NEARBY_FAILED]


def test_geolocation_lookup_runs_on_daemon_thread():
    import threading

    seen = {}

    def service():
        seen["daemon"] = threading.current_thread().daemon
        return (0.5, 32.0)

    assert resolve_position(service, (1.0, 2.0), timeout=1) == (0.5, 32.0)
    assert seen["daemon"] is True
