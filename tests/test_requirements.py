# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_spacelaw

from typing import Callable

import pytest

from coreason_spacelaw.requirements import count_mandatory, filter_guidelines, filter_requirements, guideline_applies
from coreason_spacelaw.schema import ActivityType, Guideline, JurisdictionLaw, MissionProfile

LawFactory = Callable[..., JurisdictionLaw]
GuidelineFactory = Callable[..., Guideline]


def _profile(**kwargs: object) -> MissionProfile:
    fields = {"orbit_regime": "LEO", "mission_type": "commercial", "satellite_mass_kg": 50.0}
    fields.update(kwargs)
    return MissionProfile(**fields)


def test_filter_by_activity(make_law: LawFactory) -> None:
    law = make_law("XA")
    filtered = filter_requirements(law.licensing_requirements, ActivityType.SPACECRAFT_OPERATION)
    assert [r.id for r in filtered] == ["xa-tech", "xa-notify"]
    assert count_mandatory(filtered) == 1


def test_filter_without_activity_keeps_everything(make_law: LawFactory) -> None:
    law = make_law("XA")
    filtered = filter_requirements(law.licensing_requirements, None)
    assert len(filtered) == 3
    assert count_mandatory(filtered) == 2


def test_filter_unmatched_activity_is_empty(make_law: LawFactory) -> None:
    law = make_law("XA")
    assert filter_requirements(law.licensing_requirements, ActivityType.SPACE_RESOURCES) == []


@pytest.mark.parametrize("activity", [None, *ActivityType])
def test_filter_is_idempotent(make_law: LawFactory, activity: ActivityType) -> None:
    law = make_law("XA")
    once = filter_requirements(law.licensing_requirements, activity)
    assert filter_requirements(once, activity) == once


def test_guideline_without_constraints_applies(make_guideline: GuidelineFactory) -> None:
    assert guideline_applies(make_guideline(), _profile()) is True


def test_guideline_orbit_and_mission_type(make_guideline: GuidelineFactory) -> None:
    geo_only = make_guideline(applicability={"orbit_regimes": ["GEO"]})
    assert guideline_applies(geo_only, _profile()) is False
    assert guideline_applies(geo_only, _profile(orbit_regime="GEO")) is True

    governmental = make_guideline(applicability={"mission_types": ["governmental"]})
    assert guideline_applies(governmental, _profile()) is False


def test_guideline_mass_and_category(make_guideline: GuidelineFactory) -> None:
    heavy = make_guideline(applicability={"min_mass_kg": 100})
    assert guideline_applies(heavy, _profile(satellite_mass_kg=99)) is False
    assert guideline_applies(heavy, _profile(satellite_mass_kg=100)) is True

    cubesats = make_guideline(applicability={"satellite_categories": ["cubesat"]})
    assert guideline_applies(cubesats, _profile(satellite_mass_kg=3)) is True
    assert guideline_applies(cubesats, _profile(satellite_mass_kg=30)) is False


def test_guideline_altitude_bounds(make_guideline: GuidelineFactory) -> None:
    low = make_guideline(applicability={"max_altitude_km": 2000, "min_altitude_km": 200})
    assert guideline_applies(low, _profile(altitude_km=550)) is True
    assert guideline_applies(low, _profile(altitude_km=2500)) is False
    assert guideline_applies(low, _profile(altitude_km=150)) is False
    # Unknown altitude never excludes.
    assert guideline_applies(low, _profile()) is True


def test_guideline_constellation_and_propulsion(make_guideline: GuidelineFactory) -> None:
    constellation = make_guideline(applicability={"constellations_only": True})
    assert guideline_applies(constellation, _profile(is_constellation=False)) is False
    assert guideline_applies(constellation, _profile(is_constellation=True)) is True
    assert guideline_applies(constellation, _profile()) is True

    propulsive = make_guideline(applicability={"requires_propulsion": True})
    assert guideline_applies(propulsive, _profile(has_propulsion=False)) is False
    assert guideline_applies(propulsive, _profile(has_propulsion=True)) is True
    assert guideline_applies(propulsive, _profile()) is True


def test_filter_guidelines_keeps_order(make_guideline: GuidelineFactory) -> None:
    guidelines = [
        make_guideline("g-3"),
        make_guideline("g-1", applicability={"orbit_regimes": ["GEO"]}),
        make_guideline("g-2"),
    ]
    assert [g.id for g in filter_guidelines(guidelines, _profile())] == ["g-3", "g-2"]
