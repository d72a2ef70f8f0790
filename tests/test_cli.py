# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_spacelaw

import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict
from unittest.mock import patch

import pytest
from pytest import CaptureFixture

from coreason_spacelaw.archive import get_default_archive
from coreason_spacelaw.main import build_engine, main


def _run(args: list) -> None:
    with patch.object(sys, "argv", ["main.py", *args]):
        main()


def test_cli_space_law_answers(capsys: CaptureFixture[str]) -> None:
    """Assess two jurisdictions from an inline JSON answer set."""
    answers = {"selected_jurisdictions": ["FR", "LU"], "activity_type": "spacecraft_operation"}
    _run(["--answers", json.dumps(answers)])

    output = json.loads(capsys.readouterr().out)
    assert [j["country_code"] for j in output["jurisdictions"]] == ["FR", "LU"]
    assert "applicable_requirements" in output["jurisdictions"][0]
    assert len(output["comparison_matrix"]["criteria"]) == 10


def test_cli_redacted_answers_file(capsys: CaptureFixture[str], tmp_path: Path) -> None:
    """Answers read from a file, with requirement text redacted."""
    answers_file = tmp_path / "answers.json"
    answers_file.write_text(json.dumps({"selected_jurisdictions": ["UK"]}), encoding="utf-8")

    _run(["--answers-file", str(answers_file), "--redact"])

    output = json.loads(capsys.readouterr().out)
    uk = output["jurisdictions"][0]
    assert "applicable_requirements" not in uk
    assert uk["requirement_count"] > 0


def test_cli_guideline_mode(capsys: CaptureFixture[str], tmp_path: Path) -> None:
    """Guideline assessment from a profile and a status file."""
    profile_file = tmp_path / "profile.json"
    profile_file.write_text(
        json.dumps({"orbit_regime": "GEO", "mission_type": "commercial", "satellite_mass_kg": 3500}),
        encoding="utf-8",
    )
    assessments_file = tmp_path / "assessments.json"
    assessments_file.write_text(
        json.dumps([{"guideline_id": "iadc-5.3.2-geo", "status": "compliant"}]), encoding="utf-8"
    )

    _run(["--profile-file", str(profile_file), "--assessments-file", str(assessments_file)])

    output = json.loads(capsys.readouterr().out)
    assert output["profile"]["satellite_category"] == "large"
    assert output["assessments"][0]["guideline_id"] == "iadc-5.3.2-geo"
    assert "iadc-5.3.2-geo" not in [g["guideline_id"] for g in output["gap_analysis"]]


def test_cli_custom_data_dir(
    capsys: CaptureFixture[str], tmp_path: Path, law_data: Callable[..., Dict[str, Any]]
) -> None:
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "xa.json").write_text(json.dumps(law_data("XA")), encoding="utf-8")

    _run(["--answers", json.dumps({"selected_jurisdictions": ["XA", "FR"]}), "--data-dir", str(data_dir)])

    output = json.loads(capsys.readouterr().out)
    assert [j["country_code"] for j in output["jurisdictions"]] == ["XA"]


def test_cli_invalid_answers_exit() -> None:
    with pytest.raises(SystemExit) as exc:
        _run(["--answers", json.dumps({"selected_jurisdictions": ["FR"], "activity_type": "mining"})])
    assert exc.value.code == 1


def test_cli_answers_not_an_object_exit() -> None:
    with pytest.raises(SystemExit) as exc:
        _run(["--answers", json.dumps(["FR"])])
    assert exc.value.code == 1


def test_cli_malformed_json_exit() -> None:
    with pytest.raises(SystemExit) as exc:
        _run(["--answers", "{not json"])
    assert exc.value.code == 1


def test_cli_missing_file_exit(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as exc:
        _run(["--answers-file", str(tmp_path / "missing.json")])
    assert exc.value.code == 1


def test_cli_invalid_profile_exit(tmp_path: Path) -> None:
    profile_file = tmp_path / "profile.json"
    profile_file.write_text(json.dumps({"orbit_regime": "LEO"}), encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        _run(["--profile-file", str(profile_file)])
    assert exc.value.code == 1


def test_cli_missing_data_dir_exit(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as exc:
        _run(["--answers", json.dumps({"selected_jurisdictions": ["FR"]}), "--data-dir", str(tmp_path / "nope")])
    assert exc.value.code == 1


def test_cli_requires_one_input_mode() -> None:
    with pytest.raises(SystemExit) as exc:
        _run([])
    assert exc.value.code == 2

    with pytest.raises(SystemExit):
        _run(["--answers", "{}", "--profile-file", "profile.json"])


def test_build_engine_shares_default_archive(tmp_path: Path, law_data: Callable[..., Dict[str, Any]]) -> None:
    assert build_engine(None).archive is get_default_archive()

    (tmp_path / "xa.json").write_text(json.dumps(law_data("XA")), encoding="utf-8")
    custom = build_engine(str(tmp_path))
    assert custom.archive is not get_default_archive()
    assert custom.archive.jurisdiction_codes == ["XA"]
