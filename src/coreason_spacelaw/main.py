# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_spacelaw

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, ValidationError

from coreason_spacelaw.archive import ReferenceArchive, get_default_archive
from coreason_spacelaw.config import settings
from coreason_spacelaw.core import ComplianceEngine, redact_space_law_result, validate_mission_profile
from coreason_spacelaw.exceptions import ProfileValidationError, ReferenceDataError
from coreason_spacelaw.schema import GuidelineAssessment, SpaceLawAssessmentAnswers
from coreason_spacelaw.utils.logger import logger


def load_input(text: Optional[str], file_path: Optional[str]) -> Optional[Any]:
    """Helper to load JSON input from a text arg or a file path."""
    if text:
        raw = text
    elif file_path:
        try:
            raw = Path(file_path).read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to read file {file_path}: {e}")
            sys.exit(1)
    else:
        return None

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error(f"Input is not valid JSON: {e}")
        sys.exit(1)


def build_engine(data_dir: Optional[str]) -> ComplianceEngine:
    if not data_dir:
        return ComplianceEngine(get_default_archive(), settings)
    archive = ReferenceArchive()
    archive.load_from_directory(data_dir)
    return ComplianceEngine(archive, settings)


def emit(result: BaseModel) -> None:
    print(result.model_dump_json(indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description="CoReason Space Law Compliance CLI")

    # Input Group
    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument("--answers", help="Space-law questionnaire answers as a JSON string")
    input_group.add_argument("--answers-file", help="Path to a JSON file with space-law questionnaire answers")
    input_group.add_argument("--profile-file", help="Path to a JSON mission profile for a guideline assessment")

    parser.add_argument("--assessments-file", help="Path to a JSON list of recorded guideline statuses")
    parser.add_argument("--data-dir", help="Directory of reference data to load instead of the packaged set")
    parser.add_argument("--redact", action="store_true", help="Replace full requirement text with counts")

    args = parser.parse_args()

    # Initialize Engine
    try:
        engine = build_engine(args.data_dir)
    except (FileNotFoundError, ReferenceDataError) as e:
        logger.error(f"Failed to initialize engine: {e}")
        sys.exit(1)

    # Guideline Mode
    if args.profile_file:
        profile_data = load_input(None, args.profile_file)
        assessments_data: List[Any] = load_input(None, args.assessments_file) or []
        try:
            profile = validate_mission_profile(profile_data if isinstance(profile_data, dict) else {})
            assessments = [GuidelineAssessment(**item) for item in assessments_data]
        except (ProfileValidationError, ValidationError, TypeError) as e:
            logger.error(f"Invalid guideline assessment input: {e}")
            sys.exit(1)
        emit(engine.assess_guidelines(profile, assessments))
        return

    # Space Law Mode
    answers_data = load_input(args.answers, args.answers_file)
    try:
        answers = SpaceLawAssessmentAnswers(**answers_data)
    except (ValidationError, TypeError) as e:
        logger.error(f"Invalid questionnaire answers: {e}")
        sys.exit(1)

    result = engine.assess_space_law(answers)
    emit(redact_space_law_result(result) if args.redact else result)


if __name__ == "__main__":
    main()  # pragma: no cover
