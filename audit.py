#!/usr/bin/env python3
"""
Lighthouse Score Tracker

Audits every configured URL on mobile and desktop, stores the results under
results/<region>/<timestamp>/ and reports score changes since the previous run.

Usage:
    python audit.py                      # all regions in urls.json
    python audit.py --us --de            # only the "us" and "de" regions
    python audit.py -r us --config path/to/urls.json --engine psi [--verbose]
"""

import argparse
import sys
import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from engines import ENGINES, create_engine
from orchestrator.orchestrator import Orchestrator
from orchestrator.run_context import RunContext
from utils.config import Settings, load_env_file, load_url_config
from utils.errors import AuditError
from utils.result_store import ResultStore
from utils.snapshot_selector import BaselinePolicy, SnapshotSelector


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Lighthouse Score Tracker - audit URLs per region and compare with the previous run',
        epilog='Any other --<name> flag selects the region <name>.',
        allow_abbrev=False,
    )
    parser.add_argument('--region', '-r', action='append', default=[],
                        help='Region to run (repeatable; default: all configured regions)')
    parser.add_argument('--config', '-c', help='Path to the region -> URLs JSON file (default: urls.json)')
    parser.add_argument('--results-dir', '-o', help='Results directory (default: results)')
    parser.add_argument('--engine', '-e', choices=sorted(ENGINES), help='Audit engine (default: lighthouse)')
    parser.add_argument('--baseline-policy', choices=[p.value for p in BaselinePolicy],
                        help='"previous": compare with the previous run only; '
                             '"latest-available": newest older run that has the page')
    parser.add_argument('--baseline-depth', type=int,
                        help='Older runs to inspect with --baseline-policy latest-available')
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')
    return parser


def parse_args(argv: Optional[List[str]] = None) -> Tuple[argparse.Namespace, List[str]]:
    """
    Parse CLI arguments.

    Returns:
        Tuple of (parsed options, region names in the order given)
    """
    parser = build_parser()
    args, extras = parser.parse_known_args(argv)

    regions = list(args.region)
    for extra in extras:
        if extra.startswith('--') and len(extra) > 2 and '=' not in extra:
            regions.append(extra[2:])
        else:
            parser.error(f"unrecognized argument: {extra}")

    return args, regions


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """CLI flags take precedence over environment settings."""
    if args.config:
        settings.urls_file = args.config
    if args.results_dir:
        settings.results_dir = args.results_dir
    if args.engine:
        settings.audit_engine = args.engine
    if args.baseline_policy:
        settings.baseline_policy = args.baseline_policy
    if args.baseline_depth is not None:
        settings.baseline_max_depth = args.baseline_depth
    return settings


async def run_audit_pipeline(settings: Settings, regions: List[str], engine=None) -> Tuple[Optional[Path], RunContext]:
    """
    Core pipeline usable by the CLI and tests.

    Args:
        settings: Effective settings
        regions: Region allow-list (empty: all)
        engine: Audit engine override (defaults to the configured one)

    Returns:
        Tuple of (summary path or None, RunContext)
    """
    url_config = load_url_config(settings.urls_file)
    context = RunContext(url_config=url_config, requested_regions=regions)

    store = ResultStore(settings.results_dir)
    selector = SnapshotSelector(
        store,
        policy=BaselinePolicy.parse(settings.baseline_policy),
        max_depth=settings.baseline_max_depth,
    )
    engine = engine or create_engine(settings.audit_engine, settings)

    orchestrator = Orchestrator(context, engine, store, selector)
    summary_path = await orchestrator.run_audit()
    return summary_path, context


def main(argv: Optional[List[str]] = None) -> int:
    load_env_file()
    args, regions = parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    print("\n" + "="*60)
    print("  LIGHTHOUSE SCORE TRACKER")
    print("="*60 + "\n")

    try:
        settings = apply_overrides(Settings.from_env(), args)
        print(f"Loading URLs from: {settings.urls_file}")
        print(f"Engine: {settings.audit_engine} | Results: {settings.results_dir}")
        summary_path, context = asyncio.run(run_audit_pipeline(settings, regions))
    except AuditError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"\nCritical Error during audit: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1

    summary = context.get_summary()
    print(f"\n{'='*60}")
    print(f"  RUN COMPLETE ({summary['timestamp']})")
    print(f"{'='*60}")
    print(f"Audits: {summary['audits_completed']} | Comparisons: {summary['comparisons']} "
          f"| Without baseline: {summary['baselines_missing']}")

    if summary_path:
        print(f"\nSummary HTML has been saved to {summary_path}")
    else:
        print("\nNo score differences to report.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
