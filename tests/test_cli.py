"""End-to-end CLI tests over the packaged snapshot fixture."""

from __future__ import annotations

import json
from pathlib import Path

from insight_context import cli

FIXTURE = Path(__file__).resolve().parents[1] / "fixtures" / "snapshots" / "anr_lock_chain.json"


def test_version_flag_prints_version_and_exits_zero(capsys) -> None:
    exit_code = cli.main(["--version"])
    captured = capsys.readouterr()

    assert exit_code == 0
    assert captured.out.strip() == "0.1.0"


def test_missing_input_exits_two(capsys) -> None:
    exit_code = cli.main([])

    assert exit_code == 2
    assert "--input is required" in capsys.readouterr().err


def test_cli_assembles_contexts_for_fixture(capsys) -> None:
    exit_code = cli.main(["--input", str(FIXTURE)])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    contexts = payload["insight_contexts"]
    assert [context["insightId"] for context in contexts] == ["insight-anr-1", "insight-oom-1"]

    anr = contexts[0]
    assert anr["fullStackTrace"].splitlines()[0] == "at com.example.maps.TileCache.get(TileCache.java:88)"
    assert len(anr["blockingChainStacks"]) == 1
    assert anr["blockingChainStacks"][0].startswith(
        'Thread "TileLoader" tid=14 (Native):  holds locks: 0x0c1d2e3f(java.lang.Object)\n'
    )
    assert [block.splitlines()[0] for block in anr["relevantThreads"]] == [
        'Thread "TileLoader" tid=14 (Native):',
        'Thread "Binder:2211_2" tid=9 (Native):',
    ]
    assert anr["anomalyLogs"] == ["03-14 09:26:53.400  1000  1042 E ActivityManager: ANR in com.example.maps"]
    assert len(anr["temporalContext"]) == 2

    oom = contexts[1]
    assert oom["fullStackTrace"] is None
    assert oom["anomalyLogs"] == [
        "<3>[  100.000000] Out of memory: Killed process 2211 (com.example.maps)",
        "<6>[   98.200000] lowmemorykiller: pressure",
    ]

    assert payload["hal_cross_reference"] == [
        "- IGnss (vendor.gnss@2.0) → UP, highest=2.0, 1 version(s)",
        "- ITrmbKeypad (vendor.trimble.hardware.trmbkeypad@1.0) → status unknown (not found in lshal)",
    ]
    meta = payload["context_meta"]
    assert meta["contexts_included"] == 2
    assert meta["trimmed"] is False
    assert meta["final_chars"] == meta["estimated_chars_before"]


def test_no_hal_and_out_file(tmp_path) -> None:
    out_path = tmp_path / "nested" / "contexts.json"

    exit_code = cli.main(["--input", str(FIXTURE), "--no-hal", "--out", str(out_path)])

    assert exit_code == 0
    payload = json.loads(out_path.read_text(encoding="utf-8"))
    assert payload["hal_cross_reference"] == []


def test_invalid_snapshot_exits_two(tmp_path, capsys) -> None:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"insights": []}), encoding="utf-8")

    exit_code = cli.main(["--input", str(path)])

    assert exit_code == 2
    assert "Snapshot validation failed" in capsys.readouterr().err
