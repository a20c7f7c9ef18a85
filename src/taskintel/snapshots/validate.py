from __future__ import annotations

import csv
import io
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from tx_engine import config
from tx_engine.sources.datasets import DATASETS, DatasetSpec, get_dataset

MIN_BYTES_DEFAULT = 64


@dataclass(frozen=True)
class ValidationResult:
    dataset: str
    path: Path
    ok: bool
    reason: str


def _min_bytes() -> int:
    env_value = os.environ.get("TXENGINE_SNAPSHOT_MIN_BYTES")
    if env_value:
        try:
            return int(env_value)
        except ValueError:
            pass
    return MIN_BYTES_DEFAULT


def _header_columns(text: str) -> List[str]:
    if text.startswith("\ufeff"):
        text = text[1:]
    reader = csv.reader(io.StringIO(text))
    for row in reader:
        return [cell.strip() for cell in row]
    return []


def validate_snapshot_text(spec: DatasetSpec, text: str, *, min_bytes: Optional[int] = None) -> Tuple[bool, str]:
    threshold = _min_bytes() if min_bytes is None else min_bytes
    size = len(text.encode("utf-8"))
    if size < threshold:
        return False, f"content too small ({size} bytes < {threshold})"
    if text.lstrip()[:15].lower().startswith(("<!doctype", "<html")):
        return False, "html page instead of csv"
    header = set(_header_columns(text))
    missing = [col for col in spec.required_columns if col not in header]
    if missing:
        return False, f"missing columns: {', '.join(missing)}"
    return True, "ok"


def validate_snapshots(
    datasets: Optional[Iterable[str]] = None,
    *,
    data_dir: Optional[Path] = None,
) -> List[ValidationResult]:
    base = data_dir or config.DATA_DIR
    names = list(datasets) if datasets else list(DATASETS.keys())
    results: List[ValidationResult] = []
    for name in names:
        spec = get_dataset(name)
        path = base / spec.filename
        if not path.exists():
            results.append(ValidationResult(name, path, False, "missing file"))
            continue
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            results.append(ValidationResult(name, path, False, f"unreadable: {exc}"))
            continue
        ok, reason = validate_snapshot_text(spec, text)
        results.append(ValidationResult(name, path, ok, reason))
    return results
