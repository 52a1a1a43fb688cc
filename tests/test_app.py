import json

import pytest

from steamowned import create_app, header_image_url, sorted_games
from steamowned.config import default_config, load_config, timeout_or_none


def test_header_image_url_uses_the_game_id():
    assert header_image_url(440) == "https://cdn.akamai.steamstatic.com/steam/apps/440/header.jpg"


def test_sorted_games_by_name():
    games = {3: "b", 1: "B", 2: "a"}
    assert list(sorted_games(games)) == [(2, "a"), (1, "B"), (3, "b")]


def test_default_config_bounds_every_steam_request(steam_api):
    steam_api.players["A"] = {1: "X"}
    client = create_app({"steam-key": "test-key"}).test_client()

    client.get("/?players=A|B")

    assert len(steam_api.calls) == 2
    for call in steam_api.calls:
        connect_timeout, read_timeout = call["timeout"]
        assert connect_timeout == default_config["connect-timeout"] > 0
        assert read_timeout == default_config["read-timeout"] > 0


def test_missing_players_is_a_bad_request(client):
    res = client.get("/")
    assert res.status_code == 400
    assert b"Invalid query parameter" in res.data


def test_empty_players_is_a_bad_request(client):
    res = client.get("/?players=")
    assert res.status_code == 400
    assert b"Invalid query parameter" in res.data


def test_gallery_shows_common_games(client, steam_api):
    steam_api.players["A"] = {1: "Chess", 2: "Go"}
    steam_api.players["B"] = {2: "Go", 3: "Cards"}

    res = client.get("/?players=A|B")

    assert res.status_code == 200
    page = res.get_data(as_text=True)
    assert "https://cdn.akamai.steamstatic.com/steam/apps/2/header.jpg" in page
    assert "/steam/apps/1/header.jpg" not in page
    assert "/steam/apps/3/header.jpg" not in page
    assert "1 game owned by all 2 players" in page


def test_gallery_ignores_players_without_games(client, steam_api):
    steam_api.players["A"] = {1: "X"}
    steam_api.players["C"] = {1: "X", 9: "Y"}

    res = client.get("/?players=A|B|C")

    assert res.status_code == 200
    page = res.get_data(as_text=True)
    assert "/steam/apps/1/header.jpg" in page
    assert "/steam/apps/9/header.jpg" not in page


def test_gallery_with_nothing_in_common(client, steam_api):
    res = client.get("/?players=private1|private2")

    assert res.status_code == 200
    page = res.get_data(as_text=True)
    assert "<img" not in page
    assert "0 games owned by all 2 players" in page


def test_gallery_escapes_game_names(client, steam_api):
    steam_api.players["A"] = {5: "<script>alert(1)</script>"}

    page = client.get("/?players=A").get_data(as_text=True)
    assert "<script>" not in page


def test_strict_mode_gallery(app_config, steam_api):
    app_config["require-all-players"] = True
    steam_api.players["A"] = {1: "X"}
    client = create_app(app_config).test_client()

    res = client.get("/?players=A|private")
    assert res.status_code == 502
    assert b"private" in res.data


def test_player_cap(app_config, steam_api):
    app_config["max-players"] = 2
    client = create_app(app_config).test_client()

    res = client.get("/?players=A|B|C")
    assert res.status_code == 400
    assert b"capped at 2 players" in res.data
    assert steam_api.calls == []


def test_api_get(client, steam_api):
    steam_api.players["A"] = {1: "Chess", 2: "Go"}
    steam_api.players["B"] = {2: "Go", 3: "Cards"}

    res = client.get("/api/v1/intersect_owned_games?players=A|B")

    assert res.status_code == 200
    data = res.get_json()
    assert data["errcode"] == 0
    assert data["games"] == [{"steam_id": 2, "name": "Go"}]


def test_api_post(client, steam_api):
    steam_api.players["76561197960287930"] = {10: "Counter-Strike", 440: "Team Fortress 2"}
    steam_api.players["76561197960287931"] = {440: "Team Fortress 2"}

    res = client.post(
        "/api/v1/intersect_owned_games",
        data=json.dumps({"steamids": [76561197960287930, "76561197960287931"]}),
        content_type="application/json",
    )

    assert res.status_code == 200
    assert res.get_json()["games"] == [{"steam_id": 440, "name": "Team Fortress 2"}]


@pytest.mark.parametrize("body", ["not json", json.dumps([1, 2]), json.dumps({"steamids": "A|B"})])
def test_api_post_bad_request(client, body):
    res = client.post("/api/v1/intersect_owned_games", data=body)

    assert res.status_code == 400
    data = json.loads(res.data)
    assert data["errcode"] == -1


def test_api_post_without_players(client):
    res = client.post("/api/v1/intersect_owned_games", json={"steamids": []})

    assert res.status_code == 400
    assert json.loads(res.data)["message"] == "Invalid query parameter"


def test_api_strict_mode(app_config, steam_api):
    app_config["require-all-players"] = True
    steam_api.players["A"] = {1: "X"}
    client = create_app(app_config).test_client()

    res = client.get("/api/v1/intersect_owned_games?players=A|B")
    assert res.status_code == 502
    data = json.loads(res.data)
    assert data["errcode"] == -1
    assert "B" in data["message"]


def test_api_unknown_error(app_config, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr("steamowned.intersect_owned_games", broken)
    client = create_app(app_config).test_client()

    res = client.get("/api/v1/intersect_owned_games?players=A")
    assert res.status_code == 500
    assert json.loads(res.data)["message"] == "An unknown error has occurred"


def test_xml_response_format(app_config, steam_api):
    app_config["response-format"] = "xml"
    client = create_app(app_config).test_client()

    client.get("/?players=A")
    assert steam_api.calls[0]["params"]["format"] == "xml"


def test_load_config_fills_defaults(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"steam-key": "abc", "port": 9000}))

    config = load_config(str(config_file))
    assert config["steam-key"] == "abc"
    assert config["port"] == 9000
    assert config["host"] == "localhost"
    assert config["response-format"] == "json"


def test_load_config_requires_an_explicit_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))


@pytest.mark.parametrize("value, expected", [(None, None), (0, None), (-1.0, None), (2, 2.0)])
def test_timeout_or_none(value, expected):
    assert timeout_or_none(value) == expected


def test_missing_steam_key():
    with pytest.raises(KeyError):
        create_app({})
