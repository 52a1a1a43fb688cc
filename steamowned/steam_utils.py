# This file is a part of steamowned
# Copyright (C) 2026 The steamowned Authors

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.

# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, Optional, Tuple

import requests
from requests.exceptions import ConnectTimeout, ReadTimeout, RequestException

from .exceptions import SteamAPIException, SteamFetchException, SteamUserNoGamesException

api_base = "https://api.steampowered.com/"
user_agent = "steamownedbot/1.0 (+https://github.com/pietroglyph/steamowned)"
response_formats = ("json", "xml")

log = logging.getLogger(__name__)

def _entry(appid: Any, name: Any) -> Optional[Tuple[int, str]]:
    try:
        game_id = int(str(appid).strip())
    except (TypeError, ValueError):
        return None
    return game_id, (str(name).strip() if name is not None else "")

# Extracts (appid, name) pairs from a GetOwnedGames JSON body
def parse_owned_games_json(body: Dict[str, Any]) -> Dict[int, str]:
    games = {}
    response = body.get("response", {}) if isinstance(body, dict) else {}
    for game in response.get("games", []) or []:
        if not isinstance(game, dict) or "appid" not in game:
            continue
        entry = _entry(game["appid"], game.get("name"))
        if entry:
            games[entry[0]] = entry[1]
    return games

# Extracts (appid, name) pairs from a GetOwnedGames XML body.
# Every element with an <appid> child counts as a game, wherever it sits in the tree.
def parse_owned_games_xml(content: bytes) -> Dict[int, str]:
    root = ET.fromstring(content)
    games = {}
    for node in root.iter():
        appid = node.find("appid")
        if appid is None:
            continue
        entry = _entry(appid.text, node.findtext("name"))
        if entry:
            games[entry[0]] = entry[1]
    return games

# Fetch the games a Steam user owns
#
# Returns: Dictionary of Steam App ID -> game name. Never empty.
#
# Raises:
#    SteamFetchException: connection failure, timeout or unparseable body
#    SteamAPIException: Steam replied with a non-200 status (403 = bad api key)
#    SteamUserNoGamesException: the reply held no games (private profile, bad Steam ID, or no games)
def get_owned_steam_games(
    webkey: str,
    steamid: str,
    connect_timeout: Optional[float] = None,
    read_timeout: Optional[float] = None,
    response_format: str = "json",
    session: Optional[requests.Session] = None,
) -> Dict[int, str]:
    if response_format not in response_formats:
        raise ValueError("response_format must be one of {}".format(response_formats))

    get = session.get if session is not None else requests.get
    try:
        r = get(
            api_base + "IPlayerService/GetOwnedGames/v0001/",
            params={
                "key": webkey,
                "steamid": steamid,
                "include_appinfo": 1,
                "include_played_free_games": 1,
                "format": response_format,
            },
            headers={"User-Agent": user_agent},
            timeout=(connect_timeout, read_timeout),
        )
    except ConnectTimeout:
        raise SteamFetchException(steamid, "connect timeout")
    except ReadTimeout:
        raise SteamFetchException(steamid, "read timeout")
    except RequestException as e:
        raise SteamFetchException(steamid, str(e)) from e

    if r.status_code != 200:
        raise SteamAPIException(steamid, r.status_code)

    try:
        if response_format == "xml":
            games = parse_owned_games_xml(r.content)
        else:
            games = parse_owned_games_json(r.json())
    except (ValueError, ET.ParseError) as e:
        raise SteamFetchException(steamid, "unparseable response") from e

    if not games:
        raise SteamUserNoGamesException(steamid)

    log.debug("Fetched %d owned games for Steam ID %s", len(games), steamid)
    return games
