"""
SignalCraft
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

import hashlib
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from tx_engine.sources.base import SourceUnavailableError
from tx_engine.sources.datasets import DATASETS, get_dataset
from tx_engine.sources.http_source import HttpDatasetSource
from tx_engine.utils.atomic_write import atomic_write_bytes, atomic_write_text

from .validate import validate_snapshot_text

MANIFEST_NAME = "manifest.json"


def _utc_now_z() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _load_manifest(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def refresh_snapshots(
    out_dir: Path,
    *,
    datasets: Optional[Iterable[str]] = None,
    source: Optional[HttpDatasetSource] = None,
    force: bool = False,
    logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Download dataset CSVs into `out_dir` and record their sha256 in manifest.json.

    Raises SourceUnavailableError on fetch failure and RuntimeError when content
    fails validation (unless `force`). Files already written stay in place.
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    http = source or HttpDatasetSource()
    names = list(datasets) if datasets else list(DATASETS.keys())
    manifest_path = out_dir / MANIFEST_NAME
    manifest = _load_manifest(manifest_path)

    for name in names:
        spec = get_dataset(name)
        url = http.url_for(spec.filename)
        logger.info("[snapshots] refreshing dataset=%s from %s", spec.filename, url)
        try:
            text = http.fetch_text(spec.filename)
        except SourceUnavailableError:
            logger.error("[snapshots] fetch failed dataset=%s", spec.filename)
            raise

        valid, reason = validate_snapshot_text(spec, text)
        if not valid and not force:
            message = f"Invalid snapshot for {spec.filename}: {reason}"
            logger.error(message)
            raise RuntimeError(message)
        if not valid:
            logger.warning("[snapshots] forcing write despite invalid content: %s", reason)

        payload = text.encode("utf-8")
        out_path = out_dir / spec.filename
        atomic_write_bytes(out_path, payload)
        manifest[name] = {
            "filename": spec.filename,
            "url": url,
            "sha256": hashlib.sha256(payload).hexdigest(),
            "bytes_len": len(payload),
            "fetched_at": _utc_now_z(),
            "valid": valid,
        }
        logger.info("[snapshots] wrote dataset=%s to %s (%d bytes)", spec.filename, out_path, len(payload))

    atomic_write_text(manifest_path, json.dumps(manifest, indent=2, sort_keys=True) + "\n")
    return manifest
