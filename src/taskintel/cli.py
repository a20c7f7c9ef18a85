"""
SignalCraft
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, List, Optional

from tx_engine import config
from tx_engine.pipeline.run import TaskExposurePipeline
from tx_engine.pipeline.views import EmptyResultSetError
from tx_engine.sources.base import SourceUnavailableError
from tx_engine.sources.datasets import DATASETS
from tx_engine.sources.http_source import HttpDatasetSource
from tx_engine.sources.loader import DatasetLoader, build_dataset_source

from .snapshots.refresh import refresh_snapshots
from .snapshots.validate import validate_snapshots

EXIT_OK = 0
EXIT_EMPTY_RESULT = 1
EXIT_SOURCE_UNAVAILABLE = 2

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    if logging.getLogger().hasHandlers():
        return
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return number


def _build_pipeline(args: argparse.Namespace) -> TaskExposurePipeline:
    text_cache_dir = None if args.no_disk_cache else config.SOURCE_CACHE_DIR
    source = build_dataset_source(
        args.mode,
        data_dir=Path(args.data_dir) if args.data_dir else None,
        base_url=args.base_url,
        text_cache_dir=text_cache_dir,
    )
    return TaskExposurePipeline(DatasetLoader(source))


def _run_view(args: argparse.Namespace, view: Callable[[TaskExposurePipeline], Any]) -> int:
    _setup_logging(args.verbose)
    pipeline = _build_pipeline(args)
    try:
        payload = view(pipeline)
    except SourceUnavailableError as exc:
        logger.error("Source unavailable: %s", exc)
        return EXIT_SOURCE_UNAVAILABLE
    except EmptyResultSetError as exc:
        logger.error("Empty result set: %s", exc)
        return EXIT_EMPTY_RESULT
    _print_json(payload)
    return EXIT_OK


def _summary(args: argparse.Namespace) -> int:
    return _run_view(args, lambda p: p.summary().to_dict())


def _top_risk(args: argparse.Namespace) -> int:
    return _run_view(args, lambda p: [e.to_dict() for e in p.top_risk_occupations(args.limit)])


def _occupations(args: argparse.Namespace) -> int:
    def view(pipeline: TaskExposurePipeline) -> Any:
        summaries = pipeline.occupation_summaries()
        if args.limit is not None:
            summaries = summaries[: args.limit]
        return [s.to_dict() for s in summaries]

    return _run_view(args, view)


def _split(args: argparse.Namespace) -> int:
    def view(pipeline: TaskExposurePipeline) -> Any:
        split = pipeline.automation_vs_augmentation()
        if args.counts_only:
            return {
                "automation_dominant": len(split.automation_dominant),
                "augmentation_dominant": len(split.augmentation_dominant),
                "balanced": len(split.balanced),
            }
        return split.to_dict()

    return _run_view(args, view)


def _major_groups(args: argparse.Namespace) -> int:
    return _run_view(args, lambda p: [g.to_dict() for g in p.major_groups()])


def _refresh_snapshots(args: argparse.Namespace) -> int:
    _setup_logging(args.verbose)
    out_dir = Path(args.out) if args.out else config.DATA_DIR
    source = HttpDatasetSource(args.base_url, timeout_s=args.timeout)
    try:
        manifest = refresh_snapshots(out_dir, datasets=args.dataset or None, source=source, force=args.force)
    except SourceUnavailableError as exc:
        logger.error("Snapshot refresh failed: %s", exc)
        return EXIT_SOURCE_UNAVAILABLE
    except RuntimeError as exc:
        raise SystemExit(str(exc)) from exc
    _print_json(manifest)
    return EXIT_OK


def _validate_snapshots(args: argparse.Namespace) -> int:
    results = validate_snapshots(
        args.dataset or None,
        data_dir=Path(args.data_dir) if args.data_dir else None,
    )
    failures = [result for result in results if not result.ok]
    for result in results:
        status = "OK" if result.ok else "FAIL"
        print(f"[snapshots] {status} {result.dataset}: {result.path} ({result.reason})")

    if failures:
        print("Snapshot validation failed:")
        for result in failures:
            print(f"- {result.dataset}: {result.path} ({result.reason})")
        return 1
    return 0


def _add_source_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--mode",
        choices=sorted(config.SUPPORTED_SOURCE_MODES),
        default=None,
        help="Dataset source mode (default: TXENGINE_SOURCE_MODE or auto).",
    )
    parser.add_argument("--data-dir", help="Snapshot directory (default: TXENGINE_DATA_DIR or data).")
    parser.add_argument("--base-url", help="Dataset base URL (default: TXENGINE_DATASET_BASE_URL).")
    parser.add_argument("--no-disk-cache", action="store_true", help="Skip the on-disk fetch cache.")
    parser.add_argument("-v", "--verbose", action="store_true")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskintel",
        description="Task exposure analysis over the AI task-usage and O*NET datasets.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    summary_cmd = subparsers.add_parser("summary", help="Headline statistics")
    _add_source_args(summary_cmd)
    summary_cmd.set_defaults(func=_summary)

    top_cmd = subparsers.add_parser("top-risk", help="Occupations with the highest average automation score")
    _add_source_args(top_cmd)
    top_cmd.add_argument("--limit", type=_non_negative_int, default=20)
    top_cmd.set_defaults(func=_top_risk)

    occ_cmd = subparsers.add_parser("occupations", help="All occupation summaries, automation-sorted")
    _add_source_args(occ_cmd)
    occ_cmd.add_argument("--limit", type=_non_negative_int, default=None)
    occ_cmd.set_defaults(func=_occupations)

    split_cmd = subparsers.add_parser("split", help="Automation vs augmentation task partition")
    _add_source_args(split_cmd)
    split_cmd.add_argument("--counts-only", action="store_true", help="Print bucket sizes only.")
    split_cmd.set_defaults(func=_split)

    groups_cmd = subparsers.add_parser("major-groups", help="Breakdown by SOC major group")
    _add_source_args(groups_cmd)
    groups_cmd.set_defaults(func=_major_groups)

    snapshots = subparsers.add_parser("snapshots", help="Snapshot maintenance")
    snapshots_sub = snapshots.add_subparsers(dest="snapshots_command", required=True)

    refresh = snapshots_sub.add_parser("refresh", help="Download dataset CSVs into the snapshot directory")
    refresh.add_argument("--out", help="Output directory (default: TXENGINE_DATA_DIR or data).")
    refresh.add_argument("--dataset", action="append", choices=sorted(DATASETS.keys()))
    refresh.add_argument("--base-url", help="Dataset base URL (default: TXENGINE_DATASET_BASE_URL).")
    refresh.add_argument("--force", action="store_true", help="Write snapshot even if validation fails.")
    refresh.add_argument("--timeout", type=float, default=None)
    refresh.add_argument("-v", "--verbose", action="store_true")
    refresh.set_defaults(func=_refresh_snapshots)

    validate_cmd = snapshots_sub.add_parser("validate", help="Validate local dataset snapshots")
    validate_cmd.add_argument("--dataset", action="append", choices=sorted(DATASETS.keys()))
    validate_cmd.add_argument("--data-dir", help="Snapshot directory (default: TXENGINE_DATA_DIR or data).")
    validate_cmd.set_defaults(func=_validate_snapshots)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
