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
from os import path
from typing import Any, Dict, Optional

default_config = {
    "host": "localhost",
    "port": 8000,
    "tls": False,
    "tls-cert": "/cert.pem",
    "tls-key": "/key.pem",
    "debug": False,
    "connect-timeout": 5.0,
    "read-timeout": 15.0,
    "fetch-timeout": 30.0,
    "response-format": "json",
    "require-all-players": False,
    "max-players": 0,
    "filter-false-positive-rate": 0.001,
}

def default_config_path() -> str:
    return path.join(path.dirname(path.dirname(path.abspath(__file__))), "config.json")

# Loads config.json and fills in defaults for every missing key.
# A missing file is only an error if the caller asked for a specific path.
def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    config = dict(default_config)
    file_path = config_path or default_config_path()
    if config_path or path.exists(file_path):
        with open(file_path, "r") as config_file:
            config.update(json.load(config_file))
    return config

# 0 or less means "no timeout", like the requests library's None
def timeout_or_none(value: Optional[float]) -> Optional[float]:
    if value is None or float(value) <= 0.0:
        return None
    return float(value)
