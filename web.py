#!/usr/bin/env python3
"""Bamboo Exporter — Prometheus metrics for an Atlassian Bamboo server.

Usage:
    python web.py --uri https://bamboo.example.com --user admin --password s3cret
    python web.py -c exporter.yaml --listen-address :9322
"""

from __future__ import annotations

import argparse
import logging
import sys

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse, RedirectResponse, Response

from collectors import BambooClient, BambooCollector, __version__
from collectors.config import ExporterConfig, add_config_arguments, config_from_args
from collectors.errors import ConfigurationError
from collectors.exposition import CONTENT_TYPE, render

VERSION_URL = "https://github.com/wakeful/bamboo_exporter"

logger = logging.getLogger("bamboo_exporter")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------

def create_app(
    config: ExporterConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the app. Every request to the metrics path runs a fresh scrape."""
    client = BambooClient(
        config.uri,
        config.user,
        config.password,
        timeout=config.timeout,
        transport=transport,
    )
    collector = BambooCollector(client)
    app = FastAPI(title="Bamboo Exporter", version=__version__)

    @app.get(config.telemetry_path)
    async def metrics():
        """Prometheus text exposition. Always 200; bamboo_up=0 signals failure."""
        snapshot = await collector.collect()
        return Response(content=render(snapshot), media_type=CONTENT_TYPE)

    @app.get("/api/status")
    async def api_status():
        """Same scrape as JSON, including the error messages."""
        snapshot = await collector.collect()
        return JSONResponse(snapshot.to_dict())

    if config.telemetry_path != "/":
        @app.get("/", include_in_schema=False)
        async def root():
            return RedirectResponse(config.telemetry_path, status_code=301)

    return app


# ---------------------------------------------------------------------------
# CLI entrypoint
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Bamboo Exporter — Prometheus metrics server")
    add_config_arguments(parser)
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    args = parser.parse_args(argv)

    if args.version:
        print(f"bamboo_exporter\n url: {VERSION_URL}\n version: {__version__}")
        sys.exit(2)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args)
        app = create_app(config)
    except ConfigurationError as e:
        logger.error("%s", e)
        sys.exit(2)

    logger.info("starting bamboo_exporter for uri: %s on %s", config.uri, config.listen_address)
    uvicorn.run(app, host=config.host, port=config.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
