from __future__ import annotations

from tx_engine.models import UNKNOWN_OCCUPATION, ONetTaskRecord, OccupationMatch
from tx_engine.pipeline.linker import (
    STAGE_EXACT,
    STAGE_PREFIX,
    STAGE_SUBSTRING,
    STAGE_UNRESOLVED,
    OccupationLinker,
    normalize_task_text,
)


def _onet(code: str, title: str, task: str) -> ONetTaskRecord:
    return ONetTaskRecord(occupation_code=code, occupation_title=title, task=task)


ACCOUNTANTS = OccupationMatch("13-2011.00", "Accountants")
AUDITORS = OccupationMatch("13-2011.01", "Auditors")
NURSES = OccupationMatch("29-1141.00", "Registered Nurses")


def _linker(*records: ONetTaskRecord) -> OccupationLinker:
    return OccupationLinker.from_records(records)


def test_normalize_task_text_lowercases_and_trims() -> None:
    assert normalize_task_text("  Review Contracts \n") == "review contracts"


def test_exact_match_ignores_case_and_surrounding_whitespace() -> None:
    linker = _linker(_onet("13-2011.00", "Accountants", "Prepare tax returns"))
    assert linker.resolve_with_stage("  PREPARE tax returns ") == (ACCOUNTANTS, STAGE_EXACT)


def test_prefix_scenario_resolves_to_accountants() -> None:
    linker = _linker(_onet("13-2011.00", "Accountants", "Review quarterly financial contracts for accuracy"))
    assert linker.resolve("Review quarterly financial contracts") == ACCOUNTANTS


def test_prefix_probe_hits_exact_text_of_another_task() -> None:
    linker = _linker(
        _onet("29-1141.00", "Registered Nurses", "Monitor patient vital signs"),
        _onet("13-2011.00", "Accountants", "Monitor budget spending"),
    )
    # 6-word cap: "monitor patient vital signs and record" misses, 4 words hits.
    match, stage = linker.resolve_with_stage("Monitor patient vital signs and record results hourly")
    assert (match, stage) == (NURSES, STAGE_PREFIX)


def test_prefix_probe_sees_short_keys() -> None:
    linker = _linker(_onet("13-2011.00", "Accountants", "Audit ledgers for errors and fraud risk"))
    assert "audit ledgers for errors and" in linker.short_keys
    match, stage = linker.resolve_with_stage("Audit ledgers for errors and omissions daily")
    assert (match, stage) == (ACCOUNTANTS, STAGE_PREFIX)


def test_prefix_stops_at_three_words() -> None:
    linker = _linker(_onet("13-2011.00", "Accountants", "file the"))
    # "file" is too short for the substring scan; "file the" is only two words.
    assert linker.resolve_with_stage("file the quarterly report") == (UNKNOWN_OCCUPATION, STAGE_UNRESOLVED)


def test_substring_scan_uses_first_word_in_insertion_order() -> None:
    linker = _linker(
        _onet("29-1141.00", "Registered Nurses", "Administer medications to patients"),
        _onet("13-2011.00", "Accountants", "Administer payroll systems"),
    )
    assert linker.resolve_with_stage("Administer something unrelated") == (NURSES, STAGE_SUBSTRING)


def test_substring_scan_requires_first_word_longer_than_four_chars() -> None:
    linker = _linker(_onet("13-2011.00", "Accountants", "Track audit findings"))
    assert linker.resolve("Find expenses") == UNKNOWN_OCCUPATION
    assert linker.resolve("Audit expenses") == ACCOUNTANTS
    assert linker.resolve("Findings review") == ACCOUNTANTS


def test_substring_matches_inside_words() -> None:
    linker = _linker(_onet("13-2011.00", "Accountants", "Reconcile subaccounts monthly"))
    assert linker.resolve("accounts payable") == ACCOUNTANTS


def test_unresolved_returns_unknown_sentinel() -> None:
    linker = _linker(_onet("13-2011.00", "Accountants", "Prepare tax returns"))
    match, stage = linker.resolve_with_stage("Juggle flaming torches")
    assert stage == STAGE_UNRESOLVED
    assert match.occupation_code == "Unknown"
    assert match.occupation_title == "Unknown Occupation"
    assert match.is_unknown


def test_short_key_first_writer_wins() -> None:
    linker = _linker(
        _onet("13-2011.00", "Accountants", "Review financial statements for compliance with rules"),
        _onet("13-2011.01", "Auditors", "Review financial statements for compliance and risk"),
    )
    assert linker.resolve("review financial statements for compliance") == ACCOUNTANTS


def test_full_text_overwrites_existing_key() -> None:
    linker = _linker(
        _onet("13-2011.00", "Accountants", "Review financial statements for compliance with rules"),
        _onet("13-2011.01", "Auditors", "Review financial statements for compliance"),
        _onet("13-2011.00", "Accountants", "Prepare tax returns"),
        _onet("13-2011.01", "Auditors", "prepare tax returns"),
    )
    assert linker.resolve("review financial statements for compliance") == AUDITORS
    assert "review financial statements for compliance" not in linker.short_keys
    assert linker.resolve("Prepare tax returns") == AUDITORS


def test_resolution_is_deterministic() -> None:
    records = [
        _onet("13-2011.00", "Accountants", "Review quarterly financial contracts for accuracy"),
        _onet("29-1141.00", "Registered Nurses", "Administer medications to patients"),
    ]
    first = OccupationLinker.from_records(records)
    second = OccupationLinker.from_records(records)
    names = ["Review contracts", "administer doses", "Unknown thing", "review quarterly financial contracts"]

    assert [first.resolve(n) for n in names] == [first.resolve(n) for n in names]
    assert [first.resolve(n) for n in names] == [second.resolve(n) for n in names]


def test_title_for_code_lookup() -> None:
    linker = _linker(_onet("13-2011.00", "Accountants", "Prepare tax returns"))
    assert linker.title_for_code("13-2011.00") == "Accountants"
    assert linker.title_for_code("99-9999.00") is None
