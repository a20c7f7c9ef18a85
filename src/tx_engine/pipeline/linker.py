"""
SignalCraft
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.

Resolve free-text task names to O*NET occupations.

Matching runs in stages: exact text, then prefix probes, then a first-word
substring scan. The scan is permissive and can return false positives.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional, Tuple

from tx_engine.models import UNKNOWN_OCCUPATION, ONetTaskRecord, OccupationMatch

logger = logging.getLogger(__name__)

SHORT_KEY_MIN_WORDS = 4
SHORT_KEY_WORDS = 5
PREFIX_MAX_WORDS = 6
PREFIX_MIN_WORDS = 3
SUBSTRING_MIN_WORD_LEN = 5

STAGE_EXACT = "exact"
STAGE_PREFIX = "prefix"
STAGE_SUBSTRING = "substring"
STAGE_UNRESOLVED = "unresolved"


def normalize_task_text(text: str) -> str:
    return text.lower().strip()


def split_words(normalized: str) -> List[str]:
    # Single-space split: runs of spaces yield empty "words", which count.
    return normalized.split(" ")


class OccupationLinker:
    def __init__(self) -> None:
        # One key space for full task texts and their 5-word short keys.
        # Insertion order is the substring-scan order.
        self._index: Dict[str, OccupationMatch] = {}
        self._short_keys: set[str] = set()
        self._titles_by_code: Dict[str, str] = {}

    @classmethod
    def from_records(cls, records: Iterable[ONetTaskRecord]) -> "OccupationLinker":
        linker = cls()
        for record in records:
            linker.add(record.task, record.occupation_code, record.occupation_title)
        logger.info(
            "[linker] indexed keys=%d short_keys=%d occupations=%d",
            len(linker._index),
            len(linker._short_keys),
            len(linker._titles_by_code),
        )
        return linker

    def add(self, task: str, occupation_code: str, occupation_title: str) -> None:
        key = normalize_task_text(task)
        match = OccupationMatch(occupation_code, occupation_title)

        # Full texts always win, including over an earlier short key.
        self._index[key] = match
        self._short_keys.discard(key)
        self._titles_by_code[occupation_code] = occupation_title

        words = split_words(key)
        if len(words) >= SHORT_KEY_MIN_WORDS:
            short_key = " ".join(words[:SHORT_KEY_WORDS])
            if short_key not in self._index:
                self._index[short_key] = match
                self._short_keys.add(short_key)

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    @property
    def short_keys(self) -> frozenset[str]:
        return frozenset(self._short_keys)

    def title_for_code(self, occupation_code: str) -> Optional[str]:
        return self._titles_by_code.get(occupation_code)

    def resolve_with_stage(self, task_name: str) -> Tuple[OccupationMatch, str]:
        normalized = normalize_task_text(task_name)
        match = self._index.get(normalized)
        if match is not None:
            return match, STAGE_EXACT

        words = split_words(normalized)
        for i in range(min(len(words), PREFIX_MAX_WORDS), PREFIX_MIN_WORDS - 1, -1):
            match = self._index.get(" ".join(words[:i]))
            if match is not None:
                return match, STAGE_PREFIX

        first_word = words[0]
        if len(first_word) >= SUBSTRING_MIN_WORD_LEN:
            for key, candidate in self._index.items():
                if first_word in key:
                    return candidate, STAGE_SUBSTRING

        return UNKNOWN_OCCUPATION, STAGE_UNRESOLVED

    def resolve(self, task_name: str) -> OccupationMatch:
        return self.resolve_with_stage(task_name)[0]


def link_task_names(linker: OccupationLinker, task_names: Iterable[str]) -> Dict[str, OccupationMatch]:
    """Resolve many names at once and log how each stage contributed."""
    resolved: Dict[str, OccupationMatch] = {}
    stages: Counter[str] = Counter()
    for name in task_names:
        match, stage = linker.resolve_with_stage(name)
        resolved[name] = match
        stages[stage] += 1
    logger.info(
        "[linker] resolved=%d exact=%d prefix=%d substring=%d unresolved=%d",
        len(resolved),
        stages[STAGE_EXACT],
        stages[STAGE_PREFIX],
        stages[STAGE_SUBSTRING],
        stages[STAGE_UNRESOLVED],
    )
    return resolved
