# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import argparse

from agriauth.app import create_app


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the farmer auth API (development server).")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=5000)
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args()

    app = create_app()
    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
