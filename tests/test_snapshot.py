"""Tests for snapshot loading, schema validation and conversion."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from insight_context.schemas.validate import ContractViolation, validate_snapshot
from insight_context.snapshot import load_snapshot, parse_snapshot

FIXTURE = Path(__file__).resolve().parents[1] / "fixtures" / "snapshots" / "anr_lock_chain.json"


def _minimal() -> dict:
    return {
        "insights": [],
        "logcatResult": {"entries": [], "anomalies": []},
        "kernelResult": {"entries": [], "events": []},
        "anrAnalyses": [],
    }


def test_fixture_loads_into_records() -> None:
    result = load_snapshot(str(FIXTURE))

    assert [insight.id for insight in result.insights] == ["insight-anr-1", "insight-oom-1", "insight-info-1"]
    anr = result.anr_analyses[0]
    assert anr.primary is anr.main_thread
    assert anr.main_thread.thread.waiting_on_lock.held_by_tid == 14
    assert anr.main_thread.blocking_chain[0].tid == 14
    assert anr.main_thread.suspected_binder_targets[0].thread_name == "Binder:2211_2"
    assert anr.binder_threads.total == 16
    assert result.kernel.events[0].timestamp == 100.0
    assert result.hal_status.families[0].highest_status == "UP"


def test_yaml_snapshot_is_accepted(tmp_path) -> None:
    path = tmp_path / "snapshot.yaml"
    path.write_text(yaml.safe_dump(_minimal()), encoding="utf-8")

    result = load_snapshot(str(path))

    assert result.insights == []
    assert result.hal_status is None


def test_missing_required_array_is_contract_violation() -> None:
    data = _minimal()
    del data["anrAnalyses"]

    with pytest.raises(ContractViolation, match="anrAnalyses"):
        validate_snapshot(data)


def test_invalid_severity_reports_path() -> None:
    data = _minimal()
    data["insights"].append({"id": "x", "severity": "fatal", "category": "anr", "title": "t", "source": "anr"})

    with pytest.raises(ContractViolation, match="insights.0.severity"):
        parse_snapshot(data)


def test_conversion_errors_raise_without_schema_validation() -> None:
    data = _minimal()
    data["insights"].append({"id": "x", "severity": "critical"})

    with pytest.raises(ContractViolation, match="category"):
        parse_snapshot(data, validate=False)


def test_contract_violation_is_value_error(tmp_path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError, match="not valid JSON/YAML"):
        load_snapshot(str(path))


def test_null_optional_sections_degrade_gracefully() -> None:
    data = _minimal()
    data["halStatus"] = None
    data["anrAnalyses"].append(
        {"pid": 1, "processName": "p", "threads": [], "mainThread": None, "blockedThread": None}
    )

    result = parse_snapshot(data)

    assert result.hal_status is None
    assert result.anr_analyses[0].primary is None


def test_fixture_is_valid_json() -> None:
    validate_snapshot(json.loads(FIXTURE.read_text(encoding="utf-8")))
