# listing_critic/cli.py

from __future__ import annotations

import argparse
import json
import logging
import sys

from listing_critic.config import load_settings
from listing_critic.errors import ListingCriticError
from listing_critic.logging_config import setup_logging
from listing_critic.tools.listing_pipeline import run_listing_pipeline

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Scrape a Rightmove listing into a PropertyRecord")
    p.add_argument("--url", type=str, required=True, help="Rightmove listing URL (https://www.rightmove.co.uk/properties/<id>)")
    p.add_argument("--verdict", type=int, choices=(0, 1), default=0, help="Add the critic verdict")
    p.add_argument("--area-average", type=int, choices=(0, 1), default=0, help="Rescore value for money from the area average")
    p.add_argument("--pretty", type=int, choices=(0, 1), default=1)
    p.add_argument("--log-level", type=str, default=None, help="Overrides LISTCRIT_LOG_LEVEL")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except ListingCriticError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 2

    setup_logging(args.log_level or ("DEBUG" if settings.debug else settings.log_level), settings.log_file)

    try:
        analysis, verdict = run_listing_pipeline(
            args.url,
            settings,
            with_area_average=bool(args.area_average),
            with_verdict=bool(args.verdict),
        )
    except ListingCriticError as e:
        logger.error("%s: %s", type(e).__name__, e.message)
        print(f"error: {e.message}", file=sys.stderr)
        return 1

    out: dict = {
        "record": analysis.record.model_dump(mode="json", by_alias=True),
        "fallbackUsed": analysis.fallback_used,
        "areaAverageApplied": analysis.area_average_applied,
    }
    if verdict is not None:
        out["verdict"] = verdict.model_dump(mode="json", by_alias=True)

    print(json.dumps(out, indent=2 if args.pretty else None, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
