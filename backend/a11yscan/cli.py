import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional
from pydantic import ValidationError
from a11yscan.core.config import get_settings
from a11yscan.core.engine import run_scan
from a11yscan.core.errors import A11yScanError
from a11yscan.core.logs import configure_logging
from a11yscan.core.plan import AnalyzerPlan
from a11yscan.models.schemas import LEVELS, PageMetrics, ScanRequest
from a11yscan.sources.axe import AxeResultsFindingSource
from a11yscan.sources.base import StaticMetricsSource
from a11yscan.sources.remote import HttpFindingSource, HttpMetricsSource

logger = logging.getLogger("a11yscan.cli")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="a11yscan",
        description="Score a page for accessibility compliance from rule-checker findings and page metrics.",
    )
    p.add_argument("url", help="page that was audited")
    p.add_argument("-l", "--level", dest="levels", action="append", choices=LEVELS,
                   help="level to test against (repeatable, default: A and AA)")
    p.add_argument("--axe", type=Path, help="axe-core results JSON; default asks A11YSCAN_FINDINGS_URL")
    p.add_argument("--metrics", type=Path, help="page metrics JSON; default asks A11YSCAN_METRICS_URL")
    p.add_argument("-o", "--output", type=Path, help="write the report here instead of stdout")
    p.add_argument("--log-level", default=None, help="overrides A11YSCAN_LOG_LEVEL")
    return p


def _load_metrics(path: Path) -> PageMetrics:
    try:
        return PageMetrics.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except (OSError, ValueError) as e:
        raise A11yScanError(f"could not read page metrics from {path}: {e}") from e


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level.upper() if args.log_level else None)

    try:
        request = ScanRequest(url=args.url, levels=args.levels or ["A", "AA"])
    except ValidationError as e:
        parser.error(f"invalid scan request: {e}")

    try:
        findings = AxeResultsFindingSource(args.axe) if args.axe else HttpFindingSource.from_settings()
        if args.metrics:
            metrics = StaticMetricsSource(_load_metrics(args.metrics))
        elif AnalyzerPlan.from_levels(request.levels).keys() or get_settings().metrics_url:
            metrics = HttpMetricsSource.from_settings()
        else:
            # nothing planned, metrics are never requested
            metrics = StaticMetricsSource(PageMetrics())
        report = asyncio.run(run_scan(request, findings, metrics))
    except A11yScanError as e:
        logger.error("%s", e)
        return 1

    body = report.model_dump_json(indent=2)
    if args.output:
        args.output.write_text(body + "\n", encoding="utf-8")
    else:
        sys.stdout.write(body + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
