"""
SignalCraft
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.

CSV text -> validated row models. Bad rows are logged and skipped, never fatal.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_MAX_LOGGED_ERRORS = 5


class MalformedRecordError(ValueError):
    def __init__(self, dataset: str, row_number: int, reason: str):
        super().__init__(f"{dataset} row {row_number}: {reason}")
        self.dataset = dataset
        self.row_number = row_number
        self.reason = reason


def _is_blank_row(row: Dict[str, Any]) -> bool:
    return all(value is None or not str(value).strip() for value in row.values())


def _summarize_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def parse_record(model: Type[ModelT], row: Dict[str, Any], *, dataset: str, row_number: int) -> ModelT:
    # DictReader puts surplus cells under the None key.
    cleaned = {key: value for key, value in row.items() if key is not None}
    try:
        return model.model_validate(cleaned)
    except ValidationError as exc:
        raise MalformedRecordError(dataset, row_number, _summarize_validation_error(exc)) from exc


def parse_csv_records(text: str, model: Type[ModelT], *, dataset: str) -> List[ModelT]:
    """
    Parse header-first CSV text into `model` instances, in file order.

    Row numbers in warnings are 1-based data rows (the header is row 0).
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    reader = csv.DictReader(io.StringIO(text))
    records: List[ModelT] = []
    errors: List[MalformedRecordError] = []
    for row_number, row in enumerate(reader, start=1):
        if _is_blank_row(row):
            continue
        try:
            records.append(parse_record(model, row, dataset=dataset, row_number=row_number))
        except MalformedRecordError as exc:
            errors.append(exc)

    if errors:
        for exc in errors[:_MAX_LOGGED_ERRORS]:
            logger.warning("[sources][parse] skipped malformed row: %s", exc)
        logger.warning(
            "[sources][parse] dataset=%s parsed=%d skipped=%d",
            dataset,
            len(records),
            len(errors),
        )
    else:
        logger.debug("[sources][parse] dataset=%s parsed=%d", dataset, len(records))
    return records
