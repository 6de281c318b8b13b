"""CLI entry point for the cubecrypt self-test.

Usage:
    python scripts/run_selftest.py                          # full evaluation
    python scripts/run_selftest.py --vectors 50 --trials 16 # quick run
    python scripts/run_selftest.py --no-save                # print only

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on path
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from cubecrypt.config import load_settings
from cubecrypt.evaluation import (
    EvaluationReport,
    block_avalanche,
    check_reference_vectors,
    hash_avalanche,
    run_all_targets,
)
from cubecrypt.utils.repro import make_run_dir, save_report, set_global_seed


def _cli_progress(message: str, current: int, total: int) -> None:
    """Print progress to stderr."""
    pct = (current / total * 100) if total > 0 else 0
    print(f"  [{current + 1}/{total}] ({pct:.0f}%) {message}", file=sys.stderr)


def main() -> int:
    settings = load_settings()

    parser = argparse.ArgumentParser(
        description="cubecrypt self-test: reference vectors, roundtrips, avalanche",
    )
    parser.add_argument(
        "--vectors", type=int, default=settings.roundtrip_vectors,
        help=f"Roundtrip vectors per target (default: {settings.roundtrip_vectors})",
    )
    parser.add_argument(
        "--trials", type=int, default=settings.avalanche_trials,
        help=f"Avalanche trials per measurement (default: {settings.avalanche_trials})",
    )
    parser.add_argument(
        "--seed", type=int, default=settings.global_seed,
        help=f"Random seed (default: {settings.global_seed})",
    )
    parser.add_argument(
        "--output-dir", type=str, default=settings.runs_dir,
        help=f"Output directory (default: {settings.runs_dir})",
    )
    parser.add_argument(
        "--no-save", action="store_true",
        help="Print the summary without writing a run directory",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    set_global_seed(args.seed)

    report = EvaluationReport()
    report.vector_results = check_reference_vectors()
    report.roundtrip_results = run_all_targets(
        num_vectors=args.vectors,
        seed=args.seed,
        settings=settings,
        progress_callback=_cli_progress,
    )
    report.avalanche_results = [
        hash_avalanche(trials=args.trials, seed=args.seed),
        block_avalanche(input_type="plaintext", trials=args.trials, seed=args.seed),
        block_avalanche(input_type="key", trials=args.trials, seed=args.seed),
    ]

    summary = report.to_summary()
    print(summary)

    if not args.no_save:
        paths = make_run_dir(args.output_dir, "selftest")
        save_report(paths, report.to_dict(), summary)
        print(f"\nAll results saved to: {paths.run_dir}")

    return 0 if report.all_pass else 1


if __name__ == "__main__":
    sys.exit(main())
