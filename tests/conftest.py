import json

import pytest

from steamowned import create_app


class FakeResponse:
    def __init__(self, status_code=200, payload=None, content=None):
        self.status_code = status_code
        self._payload = payload
        if content is None:
            content = json.dumps(payload).encode("utf-8") if payload is not None else b""
        self.content = content

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


def owned_games_payload(games):
    return {
        "response": {
            "game_count": len(games),
            "games": [{"appid": appid, "name": name, "playtime_forever": 0} for appid, name in games.items()],
        }
    }


class FakeSteamAPI:
    """Fake GetOwnedGames endpoint.

    Map a Steam ID in ``players`` to a dict of owned games, a FakeResponse or
    an exception instance. Unknown Steam IDs get Steam's empty reply for
    private profiles.
    """

    def __init__(self):
        self.players = {}
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        reply = self.players.get(params["steamid"], FakeResponse(200, {"response": {}}))
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, FakeResponse):
            return reply
        return FakeResponse(200, owned_games_payload(reply))


@pytest.fixture()
def steam_api(monkeypatch):
    api = FakeSteamAPI()

    def session_get(session, url, **kwargs):
        return api.get(url, **kwargs)

    monkeypatch.setattr("requests.get", api.get)
    monkeypatch.setattr("requests.Session.get", session_get)
    return api


@pytest.fixture()
def app_config():
    return {
        "steam-key": "test-key",
        "fetch-timeout": 5.0,
        "filter-false-positive-rate": 1e-9,
    }


@pytest.fixture()
def client(app_config):
    return create_app(app_config).test_client()
