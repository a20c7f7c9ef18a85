"""
SignalCraft
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

try:
    from fastapi import Depends, FastAPI, HTTPException, Query
except ModuleNotFoundError as exc:  # pragma: no cover - exercised in environments without dashboard extras
    raise RuntimeError("Dashboard dependencies are not installed. Install with: pip install -e '.[dashboard]'") from exc

from tx_engine import config
from tx_engine.pipeline.run import TaskExposurePipeline
from tx_engine.pipeline.views import EmptyResultSetError
from tx_engine.sources.base import SourceUnavailableError
from tx_engine.sources.loader import DatasetLoader, build_dataset_source

app = FastAPI(title="Task Exposure Dashboard API")
logger = logging.getLogger(__name__)

T = TypeVar("T")

_PIPELINE: Optional[TaskExposurePipeline] = None


def get_pipeline() -> TaskExposurePipeline:
    # One loader per process so the source cache is shared across requests.
    global _PIPELINE
    if _PIPELINE is None:
        source = build_dataset_source(text_cache_dir=config.SOURCE_CACHE_DIR)
        _PIPELINE = TaskExposurePipeline(DatasetLoader(source))
    return _PIPELINE


def _guarded(view: Callable[[], T]) -> T:
    try:
        return view()
    except SourceUnavailableError as exc:
        logger.error("[dashboard] source unavailable: %s", exc)
        raise HTTPException(status_code=503, detail={"error": "source_unavailable", "dataset": exc.dataset}) from exc
    except EmptyResultSetError as exc:
        logger.warning("[dashboard] empty result set: %s", exc)
        raise HTTPException(status_code=422, detail={"error": "empty_result_set"}) from exc


@app.get("/healthz")
def healthz() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/summary")
def summary(pipeline: TaskExposurePipeline = Depends(get_pipeline)) -> Dict[str, Any]:
    return _guarded(lambda: pipeline.summary().to_dict())


@app.get("/occupations")
def occupations(
    limit: Optional[int] = Query(default=None, ge=0),
    pipeline: TaskExposurePipeline = Depends(get_pipeline),
) -> List[Dict[str, Any]]:
    summaries = _guarded(pipeline.occupation_summaries)
    if limit is not None:
        summaries = summaries[:limit]
    return [s.to_dict() for s in summaries]


@app.get("/occupations/top-risk")
def top_risk(
    limit: int = Query(default=20, ge=0),
    pipeline: TaskExposurePipeline = Depends(get_pipeline),
) -> List[Dict[str, Any]]:
    return [e.to_dict() for e in _guarded(lambda: pipeline.top_risk_occupations(limit))]


@app.get("/tasks/split")
def task_split(pipeline: TaskExposurePipeline = Depends(get_pipeline)) -> Dict[str, Any]:
    return _guarded(pipeline.automation_vs_augmentation).to_dict()


@app.get("/major-groups")
def major_groups(pipeline: TaskExposurePipeline = Depends(get_pipeline)) -> List[Dict[str, Any]]:
    return [g.to_dict() for g in _guarded(pipeline.major_groups)]
