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

import json
import traceback
from typing import Any, Dict, Iterable, Optional, Tuple

from flask import Flask, jsonify, render_template, request

from .config import default_config, load_config, timeout_or_none
from .exceptions import IncompleteIntersectionException, InvalidPlayersException
from .intersect_utils import check_players, intersect_owned_games, parse_players

def header_image_url(game_id: int) -> str:
    return "https://cdn.akamai.steamstatic.com/steam/apps/{}/header.jpg".format(game_id)

def sorted_games(games: Dict[int, str]) -> Iterable[Tuple[int, str]]:
    return sorted(games.items(), key=lambda item: (item[1].lower(), item[0]))

def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    if config is None:
        config = load_config()
    else:
        config = {**default_config, **config}
    steam_key = config["steam-key"]
    debug = config.get("debug", config.get("DEBUG", False))
    connect_timeout = timeout_or_none(config.get("connect-timeout"))
    read_timeout = timeout_or_none(config.get("read-timeout"))
    fetch_timeout = timeout_or_none(config.get("fetch-timeout"))
    response_format = config.get("response-format", "json")
    require_all = config.get("require-all-players", False)
    max_players = int(config.get("max-players", 0) or 0)
    false_positive_rate = float(config.get("filter-false-positive-rate", 0.001))

    app = Flask(__name__)
    app.debug = debug

    app.logger.info("fetches set to time out after %s seconds", fetch_timeout)

    def intersect(steamids):
        return intersect_owned_games(
            steam_key,
            steamids,
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
            fetch_timeout=fetch_timeout,
            response_format=response_format,
            require_all=require_all,
            false_positive_rate=false_positive_rate,
        )

    def error_json(message, status):
        return (
            json.dumps({"message": message, "errcode": -1}),
            status,
            {"Content-Type": "application/json"}
        )

    @app.route("/")
    def index():
        try:
            players = parse_players(request.args.get("players"), max_players)
        except InvalidPlayersException as e:
            app.logger.info("HTTP 400 %s", e.message)
            return (e.message, 400)

        try:
            games = intersect(players)
        except IncompleteIntersectionException as e:
            app.logger.warning("HTTP 502 %s", e)
            return (e.message, 502)

        return render_template(
            "gallery.html",
            games=[(game_id, name, header_image_url(game_id)) for game_id, name in sorted_games(games)],
            player_count=len(players)
        )

    # Errcodes
    # -1: An error occurred with a message. Additional fields: "message"
    # 0: No error
    @app.route("/api/v1/intersect_owned_games", methods=["GET", "POST"])
    def intersect_owned_games_v1():
        try:
            if request.method == "POST":
                body = request.get_json(force=True, silent=True)
                if not isinstance(body, dict) or not isinstance(body.get("steamids"), list):
                    raise InvalidPlayersException("Received a bad request. Please refresh the page and try again.")
                steamids = check_players([str(steamid) for steamid in body["steamids"]], max_players)
            else:
                steamids = parse_players(request.args.get("players"), max_players)
        except InvalidPlayersException as e:
            return error_json(e.message, 400)

        try:
            games = intersect(steamids)
        except IncompleteIntersectionException as e:
            return error_json(e.message, 502)
        except Exception:
            app.logger.exception("Intersection failed")
            if debug:
                return error_json(traceback.format_exc(), 500)
            else:
                return error_json("An unknown error has occurred", 500)

        return jsonify({
            "message": "Intersected successfully",
            "games": [{"steam_id": game_id, "name": name} for game_id, name in sorted_games(games)],
            "errcode": 0
        })

    return app
