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

import argparse
import logging

from . import create_app
from .config import load_config

def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="steamowned", description="Show the Steam games a group of players all own")
    parser.add_argument("--config", help="path to config.json (defaults to the one next to the package)")
    parser.add_argument("--host", help="host to listen on for the webserver")
    parser.add_argument("--port", type=int, help="port to listen on for the webserver")
    parser.add_argument("--tls", action="store_true", default=None, help="enable serving with TLS (https)")
    parser.add_argument("--tls-cert", help="path to certificate file")
    parser.add_argument("--tls-key", help="path to private key for certificate")
    parser.add_argument("--api-key", help="Steam Web API key")
    return parser.parse_args(argv)

def main(argv=None):
    args = parse_args(argv)
    config = load_config(args.config)
    overrides = {
        "host": args.host,
        "port": args.port,
        "tls": args.tls,
        "tls-cert": args.tls_cert,
        "tls-key": args.tls_key,
        "steam-key": args.api_key,
    }
    config.update({key: value for key, value in overrides.items() if value is not None})

    if "steam-key" not in config:
        raise SystemExit("No Steam Web API key given (set \"steam-key\" in config.json or pass --api-key)")

    logging.basicConfig(
        level=logging.DEBUG if config.get("debug") else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    app = create_app(config)
    ssl_context = None
    if config["tls"]:
        app.logger.info("Serving with TLS...")
        ssl_context = (config["tls-cert"], config["tls-key"])
    app.run(host=config["host"], port=int(config["port"]), ssl_context=ssl_context)

if __name__ == "__main__":
    main()
