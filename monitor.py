#!/usr/bin/env python3
"""Bamboo Exporter — one-shot check from the terminal.

Runs a single scrape and prints what Prometheus would see.

Usage:
    python monitor.py --uri https://bamboo.example.com --user admin --password s3cret
    python monitor.py -c exporter.yaml --json

Exit status: 0 if bamboo_up is 1, 1 if the scrape degraded, 2 on bad config.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from collectors import BambooClient, BambooCollector
from collectors.config import add_config_arguments, config_from_args
from collectors.errors import ConfigurationError
from collectors.exposition import render


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Bamboo Exporter — one-shot scrape")
    add_config_arguments(parser)
    parser.add_argument("--json", action="store_true", help="Print the snapshot as JSON")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        config = config_from_args(args)
        client = BambooClient(config.uri, config.user, config.password, timeout=config.timeout)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)

    snapshot = asyncio.run(BambooCollector(client).collect())

    if args.json:
        print(json.dumps(snapshot.to_dict(), indent=2))
    else:
        sys.stdout.write(render(snapshot).decode())

    sys.exit(0 if snapshot.up else 1)


if __name__ == "__main__":
    main()
