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
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List

import pytest
from loguru import logger

from coreason_spacelaw.archive import ReferenceArchive
from coreason_spacelaw.schema import Guideline, JurisdictionLaw, SpaceLawCrossReference

ALL_ACTIVITIES = [
    "spacecraft_operation",
    "launch_vehicle",
    "launch_site",
    "in_orbit_services",
    "earth_observation",
    "satellite_communications",
    "space_resources",
]


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _law_data(code: str = "XA", **overrides: Any) -> Dict[str, Any]:
    """A recent enacted law; in 2026 only the moderate timeline bonus fires (score 58)."""
    base: Dict[str, Any] = {
        "country_code": code,
        "country_name": f"Country {code}",
        "flag_emoji": "🏳️",
        "legislation": {
            "name": f"Space Act {code}",
            "name_local": f"Loi {code}",
            "year_enacted": 2024,
            "status": "enacted",
        },
        "licensing_authority": {
            "name": f"Agency {code}",
            "name_local": f"Agence {code}",
            "website": "https://agency.example",
            "contact_email": "licensing@agency.example",
        },
        "licensing_requirements": [
            {
                "id": f"{code.lower()}-tech",
                "category": "technical_assessment",
                "title": "Technical assessment",
                "description": "Mission technical dossier.",
                "mandatory": True,
                "applicable_to": ["spacecraft_operation", "satellite_communications"],
            },
            {
                "id": f"{code.lower()}-launch",
                "category": "safety_assessment",
                "title": "Launch safety",
                "description": "Launch safety case.",
                "mandatory": True,
                "applicable_to": ["launch_vehicle"],
            },
            {
                "id": f"{code.lower()}-notify",
                "category": "notification",
                "title": "Notification",
                "description": "Notify changes in operations.",
                "mandatory": False,
                "applicable_to": ["spacecraft_operation"],
            },
        ],
        "applicability_rules": [],
        "insurance_liability": {
            "mandatory_insurance": True,
            "minimum_coverage": "€60M",
            "government_indemnification": False,
            "liability_regime": "unlimited",
            "third_party_required": True,
        },
        "debris_mitigation": {
            "deorbit_requirement": True,
            "deorbit_timeline": "25 years",
            "passivation_required": True,
            "debris_mitigation_plan": True,
            "collision_avoidance": True,
        },
        "data_sensing": {"remote_sensing_license": False, "data_distribution_restrictions": False},
        "timeline": {
            "typical_processing_weeks": {"min": 14, "max": 18},
            "application_fee": "€5,000",
            "annual_fee": None,
        },
        "registration": {"national_registry_exists": False, "un_registration_required": True},
        "eu_space_act_cross_ref": {
            "relationship": "superseded",
            "description": f"{code} authorization moves to the EU regime.",
            "transition_notes": "Existing licences are grandfathered.",
        },
        "last_updated": "2026-01",
    }
    return _deep_merge(base, overrides)


def _guideline_data(guideline_id: str = "g-1", **overrides: Any) -> Dict[str, Any]:
    base: Dict[str, Any] = {
        "id": guideline_id,
        "source": "IADC",
        "reference_number": guideline_id.upper(),
        "title": f"Guideline {guideline_id}",
        "description": "A debris mitigation guideline.",
        "category": "space_debris",
        "binding_level": "mandatory",
        "severity": "critical",
        "applicability": {},
        "implementation_guidance": [f"Implement {guideline_id}"],
    }
    return _deep_merge(base, overrides)


@pytest.fixture
def law_data() -> Callable[..., Dict[str, Any]]:
    return _law_data


@pytest.fixture
def guideline_data() -> Callable[..., Dict[str, Any]]:
    return _guideline_data


@pytest.fixture
def make_law() -> Callable[..., JurisdictionLaw]:
    def _make(code: str = "XA", **overrides: Any) -> JurisdictionLaw:
        return JurisdictionLaw(**_law_data(code, **overrides))

    return _make


@pytest.fixture
def make_guideline() -> Callable[..., Guideline]:
    def _make(guideline_id: str = "g-1", **overrides: Any) -> Guideline:
        return Guideline(**_guideline_data(guideline_id, **overrides))

    return _make


@pytest.fixture
def build_archive(tmp_path: Path) -> Callable[..., ReferenceArchive]:
    """Write the given records to a JSON tree under tmp_path and load it."""

    def _build(
        jurisdictions: Iterable[JurisdictionLaw] = (),
        guidelines: Iterable[Guideline] = (),
        cross_references: Iterable[SpaceLawCrossReference] = (),
        version: str = "1.0.0",
    ) -> ReferenceArchive:
        root = tmp_path / "reference"
        root.mkdir(exist_ok=True)
        bundle = {
            "version": version,
            "jurisdictions": [j.model_dump(mode="json") for j in jurisdictions],
            "guidelines": [g.model_dump(mode="json") for g in guidelines],
            "cross_references": [x.model_dump(mode="json") for x in cross_references],
        }
        (root / "bundle.json").write_text(json.dumps(bundle), encoding="utf-8")
        archive = ReferenceArchive()
        archive.load_from_directory(root)
        return archive

    return _build


@pytest.fixture
def log_messages() -> Iterable[List[str]]:
    """Capture formatted loguru records for the duration of a test."""
    messages: List[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
