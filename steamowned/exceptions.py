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

from typing import Collection, Optional

class InvalidPlayersException(Exception):
    message = "Invalid query parameter"

    def __init__(self, message: Optional[str] = None):
        if message:
            self.message = message
        super().__init__(self.message)

    def __str__(self):
        return "InvalidPlayersException, {}".format(self.message)

class SteamUserException(Exception):
    steam_id = None
    steam_name = None

    def __init__(self, steam_id: str, steam_name: str = None):
        self.steam_id = steam_id
        if steam_name:
            self.steam_name = steam_name
        super().__init__(steam_id)

    def __str__(self):
        if self.steam_name:
            return "SteamUserException, An exception occurred with the Steam user {} (Steam ID {})".format(self.steam_name, self.steam_id)
        else:
            return "SteamUserException, An exception occurred with the Steam ID {}".format(self.steam_id)

# Network, transport or parse failure while fetching one user's games
class SteamFetchException(SteamUserException):
    reason = None

    def __init__(self, steam_id: str, reason: str = None):
        super().__init__(steam_id)
        self.reason = reason

    def __str__(self):
        if self.reason:
            return "SteamFetchException, Couldn't fetch the owned games of Steam ID {} ({})".format(self.steam_id, self.reason)
        else:
            return "SteamFetchException, Couldn't fetch the owned games of Steam ID {}".format(self.steam_id)

class SteamAPIException(SteamFetchException):
    error_code = None

    def __init__(self, steam_id: str, error_code: int):
        super().__init__(steam_id, "HTTP {}".format(error_code))
        self.error_code = error_code

    def __str__(self):
        if self.error_code == 403:
            return "SteamAPIException, The Steam API rejected the Web API key while fetching Steam ID {}".format(self.steam_id)
        return "SteamAPIException, The Steam API returned the error code {} for Steam ID {}".format(self.error_code, self.steam_id)

class SteamUserNoGamesException(SteamUserException):
    def __str__(self):
        if self.steam_name:
            return "SteamUserNoGamesException, The Steam user {} (Steam ID {}) has no visible games".format(self.steam_name, self.steam_id)
        else:
            return "SteamUserNoGamesException, The Steam user with the Steam ID {} has no visible games (private profile or bad Steam ID?)".format(self.steam_id)

class IncompleteIntersectionException(Exception):
    steam_ids = ()

    def __init__(self, steam_ids: Collection[str]):
        self.steam_ids = tuple(steam_ids)
        super().__init__(*self.steam_ids)

    @property
    def message(self) -> str:
        return "Couldn't retrieve the owned games of {} player(s): {}".format(
            len(self.steam_ids), ", ".join(self.steam_ids)
        )

    def __str__(self):
        return "IncompleteIntersectionException, {}".format(self.message)
