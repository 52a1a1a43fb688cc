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
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, Collection, Dict, List, Mapping, Optional, Sequence, Set

import requests
from rbloom import Bloom

from .exceptions import IncompleteIntersectionException, InvalidPlayersException, SteamUserException
from .steam_utils import get_owned_steam_games

player_separator = "|"

log = logging.getLogger(__name__)

# Approximate set of game ids: no false negatives, false positives at
# roughly false_positive_rate once len(game_ids) ids are in it
def build_owned_filter(game_ids: Collection[int], false_positive_rate: float = 0.001) -> Bloom:
    if not 0.0 < false_positive_rate < 1.0:
        raise ValueError("false_positive_rate must be between 0 and 1")
    owned_filter = Bloom(max(1, len(game_ids)), false_positive_rate)
    owned_filter.update(game_ids)
    return owned_filter

class GameIntersection:
    """The running intersection of every owned-games list merged so far.

    The first non-empty list seeds it. Every later list can only remove
    entries. After ``close()`` nothing can change it, and ``contributors``
    holds exactly the Steam IDs whose games were applied.
    """

    def __init__(self, false_positive_rate: float = 0.001):
        self.false_positive_rate = false_positive_rate
        self._games: Dict[int, str] = {}
        self._contributors: Set[str] = set()
        self._seeded = False
        self._closed = False
        self._lock = threading.Lock()

    @property
    def seeded(self) -> bool:
        return self._seeded

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def contributors(self) -> Set[str]:
        with self._lock:
            return set(self._contributors)

    def __len__(self):
        with self._lock:
            return len(self._games)

    # Returns True if the owned games were applied to the intersection
    def seed_or_narrow(self, owned: Mapping[int, str], steamid: Optional[str] = None) -> bool:
        if not owned:
            return False

        with self._lock:
            if self._closed:
                return False

            if steamid is not None:
                self._contributors.add(steamid)

            if not self._seeded:
                self._games.update(owned)
                self._seeded = True
                return True

            owned_filter = build_owned_filter(owned.keys(), self.false_positive_rate)
            for game_id in list(self._games):
                if game_id not in owned_filter:
                    del self._games[game_id]
            return True

    def close(self):
        with self._lock:
            self._closed = True

    def snapshot(self) -> Dict[int, str]:
        with self._lock:
            return dict(self._games)

# Splits the raw "players" parameter into Steam IDs
def parse_players(raw: Optional[str], max_players: int = 0) -> List[str]:
    if not raw:
        raise InvalidPlayersException()
    return check_players(raw.split(player_separator), max_players)

def check_players(players: Sequence[str], max_players: int = 0) -> List[str]:
    if not players:
        raise InvalidPlayersException()
    if max_players > 0 and len(players) > max_players:
        raise InvalidPlayersException("Games intersection is capped at {} players.".format(max_players))
    return list(players)

def _fetch_and_merge(fetch: Callable[[str], Mapping[int, str]], steamid: str, intersection: GameIntersection) -> bool:
    try:
        owned = fetch(steamid)
    except SteamUserException as e:
        log.warning("%s", e)
        return False
    except Exception:
        log.exception("Unexpected failure fetching the owned games of Steam ID %s", steamid)
        return False

    if not owned:
        log.warning("Couldn't extract appids using Steam ID %s", steamid)
        return False
    if not intersection.seed_or_narrow(owned, steamid):
        log.warning("Owned games of Steam ID %s arrived after the fetch deadline and were dropped", steamid)
        return False
    return True

# Intersects the owned games of every Steam ID
#
# Returns: Dictionary of Steam App ID -> game name for every game owned by all
# players whose games could be fetched. Empty if they share nothing or every fetch failed.
#
# Raises:
#    InvalidPlayersException: no Steam IDs were given
#    IncompleteIntersectionException: require_all is set and some player's games couldn't be used
def intersect_owned_games(
    webkey: str,
    steamids: Sequence[str],
    connect_timeout: Optional[float] = None,
    read_timeout: Optional[float] = None,
    fetch_timeout: Optional[float] = None,
    response_format: str = "json",
    require_all: bool = False,
    false_positive_rate: float = 0.001,
    fetch: Optional[Callable[[str], Mapping[int, str]]] = None,
) -> Dict[int, str]:
    if not steamids:
        raise InvalidPlayersException()

    session = None
    if fetch is None:
        session = requests.Session()

        def fetch(steamid):
            return get_owned_steam_games(
                webkey,
                steamid,
                connect_timeout=connect_timeout,
                read_timeout=read_timeout,
                response_format=response_format,
                session=session,
            )

    intersection = GameIntersection(false_positive_rate)
    executor = ThreadPoolExecutor(max_workers=len(steamids), thread_name_prefix="steamowned-fetch")
    try:
        futures = {
            executor.submit(_fetch_and_merge, fetch, steamid, intersection): steamid
            for steamid in steamids
        }
        done, not_done = wait(futures, timeout=fetch_timeout)
        intersection.close()
    finally:
        # Threads stuck past the deadline are abandoned; the closed intersection ignores them
        executor.shutdown(wait=False, cancel_futures=True)
        if session is not None:
            session.close()

    # A task can still finish between wait() and close(), so trust the intersection's record
    contributors = intersection.contributors
    failed = [futures[future] for future in done if futures[future] not in contributors]
    timed_out = [futures[future] for future in not_done if futures[future] not in contributors]
    for steamid in timed_out:
        log.warning("Fetching the owned games of Steam ID %s missed the %s second deadline", steamid, fetch_timeout)

    games = intersection.snapshot()
    log.info(
        "Intersection of %d player(s) resulted in %d games (%d failed, %d timed out)",
        len(steamids), len(games), len(failed), len(timed_out)
    )

    if require_all and (failed or timed_out):
        raise IncompleteIntersectionException(failed + timed_out)

    return games
