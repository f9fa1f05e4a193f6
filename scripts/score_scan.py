#!/usr/bin/env python
"""Score a saved scan payload and print the visibility report as JSON.

The payload is the judge collaborator's output for one scan:

    {
      "brandName": "Acme",
      "competitors": ["Widget Inc", "Gadget LLC"],
      "results": [
        {"model": "openai", "promptText": "...", "responderAnswer": "...",
         "judgeResult": {"isMentioned": true, "mentionType": "direct", ...}}
      ]
    }

Usage:
    python scripts/score_scan.py scan.json [--top 5] [--pretty]
    cat scan.json | python scripts/score_scan.py -
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from geoscore.config import get_settings  # noqa: E402
from geoscore.exceptions import GeoScoreError  # noqa: E402
from geoscore.logging import get_logger, setup_logging  # noqa: E402
from geoscore.schemas import load_scan_payload  # noqa: E402
from visibility.pipeline import ScanScorer  # noqa: E402


def read_payload(source: str) -> dict:
    """Read a JSON payload from a file path or "-" for stdin."""
    if source == "-":
        return json.load(sys.stdin)
    with open(source, encoding="utf-8") as f:
        return json.load(f)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Score a scan payload: visibility score and share of voice"
    )
    parser.add_argument(
        "payload",
        type=str,
        help="Path to the scan JSON file, or - for stdin",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=None,
        help="Number of top competitors to report (default from settings)",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Indent the JSON output",
    )

    args = parser.parse_args(argv)

    setup_logging()
    logger = get_logger(__name__)

    settings = get_settings()
    if args.top is not None:
        settings = settings.model_copy(update={"top_competitors_limit": args.top})

    try:
        payload = load_scan_payload(read_payload(args.payload))
    except (OSError, json.JSONDecodeError) as e:
        logger.error("payload_unreadable", source=args.payload, error=str(e))
        return 2
    except GeoScoreError as e:
        logger.error("payload_invalid", source=args.payload, **e.to_dict()["error"])
        return 2

    report = ScanScorer(settings).score_scan(
        brand_name=payload.brand_name,
        competitors=payload.competitors,
        runs=payload.to_runs(),
    )

    json.dump(report.to_dict(), sys.stdout, indent=2 if args.pretty else None)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
