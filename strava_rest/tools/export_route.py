#!/usr/bin/env python3
"""Export a Strava route as GPX or TCX.

Downloads the route document through :class:`APIClient`, checks that the
payload is a well-formed XML document and writes it to disk (or stdout).

Environment requirements:
- ``STRAVA_ACCESS_TOKEN`` must be set (or stored in ``.env``) unless
  ``--access-token`` is given. The token needs ``read_all`` scope for
  private routes.

Usage examples:

    # Save route 12345 as route_12345.gpx
    python -m strava_rest.tools.export_route --route-id 12345

    # Print the TCX export to stdout
    python -m strava_rest.tools.export_route --route-id 12345 --format tcx --no-file
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as ET

from strava_rest.config import STRAVA_ACCESS_TOKEN
from strava_rest.errors import ServiceError
from strava_rest.models import Verbosity
from strava_rest.strava_client import APIClient, HTTPTransport

LOGGER = logging.getLogger("export_route")

# Local tag names of the point elements in each format.
POINT_TAGS = {
    "gpx": {"rtept", "trkpt"},
    "tcx": {"Trackpoint"},
}


def fetch_route_export(client: APIClient, route_id: int, fmt: str) -> str:
    """Return the route document in ``fmt`` (``gpx`` or ``tcx``).

    Raises:
        RuntimeError: If Strava did not return a text document.
    """
    if fmt == "gpx":
        payload = client.get_route_as_gpx(route_id)
    elif fmt == "tcx":
        payload = client.get_route_as_tcx(route_id)
    else:
        raise ValueError(f"Unsupported export format: {fmt}")

    if not isinstance(payload, str):
        raise RuntimeError(f"Route {route_id} export failed: {payload!r}")
    return payload


def count_points(document: str, fmt: str) -> int:
    """Count route/track points in an export document.

    Raises:
        ET.ParseError: If the document is not well-formed XML.
        DefusedXmlException: If the document declares entities or external
            references.
    """
    root = ET.fromstring(document)
    tags = POINT_TAGS[fmt]
    # Tags carry the namespace as "{uri}local".
    return sum(1 for el in root.iter() if el.tag.rsplit("}", 1)[-1] in tags)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Export a Strava route as GPX or TCX"
    )
    parser.add_argument(
        "--route-id",
        type=int,
        required=True,
        help="Strava route ID to export",
    )
    parser.add_argument(
        "--format",
        dest="fmt",
        default="gpx",
        choices=sorted(POINT_TAGS),
        help="Export format (default: gpx)",
    )
    parser.add_argument(
        "--access-token",
        default=STRAVA_ACCESS_TOKEN,
        help="Access token (default: STRAVA_ACCESS_TOKEN)",
    )
    parser.add_argument(
        "--output-file",
        help="Output file path (default: route_<id>.<format>)",
    )
    parser.add_argument(
        "--no-file",
        action="store_true",
        help="Print to stdout instead of writing to file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Python logging level",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the export_route tool."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))

    if not args.access_token:
        LOGGER.error("No access token: pass --access-token or set STRAVA_ACCESS_TOKEN")
        return 1

    LOGGER.info("Exporting route %s as %s", args.route_id, args.fmt.upper())
    with HTTPTransport() as transport:
        client = APIClient(args.access_token, transport, Verbosity.BASIC)
        try:
            document = fetch_route_export(client, args.route_id, args.fmt)
        except (ServiceError, RuntimeError) as exc:
            LOGGER.error("%s", exc)
            return 1

    try:
        points = count_points(document, args.fmt)
    except (ET.ParseError, DefusedXmlException) as exc:
        LOGGER.error("Route %s export is not valid XML: %s", args.route_id, exc)
        return 1
    LOGGER.info("Retrieved route %s with %d points", args.route_id, points)

    if args.no_file:
        print(document)
        return 0

    output_path = Path(args.output_file or f"route_{args.route_id}.{args.fmt}")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(document)
    LOGGER.info("Output written to %s", output_path)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)
