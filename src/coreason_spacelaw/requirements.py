# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_spacelaw

from typing import Iterable, List, Optional, Sequence

from coreason_spacelaw.schema import (
    ActivityType,
    Guideline,
    LicensingRequirement,
    MissionProfile,
)


def filter_requirements(
    requirements: Iterable[LicensingRequirement], activity_type: Optional[ActivityType]
) -> List[LicensingRequirement]:
    """
    Keep the requirements that bind the declared activity.
    With no declared activity every requirement is kept.
    """
    if activity_type is None:
        return list(requirements)
    return [req for req in requirements if activity_type in req.applicable_to]


def count_mandatory(requirements: Sequence[LicensingRequirement]) -> int:
    return sum(1 for req in requirements if req.mandatory)


def guideline_applies(guideline: Guideline, profile: MissionProfile) -> bool:
    """
    Check a guideline's applicability block against a mission profile.
    Profile fields that were not declared never exclude a guideline.
    """
    app = guideline.applicability

    if app.orbit_regimes is not None and profile.orbit_regime not in app.orbit_regimes:
        return False
    if app.mission_types is not None and profile.mission_type not in app.mission_types:
        return False
    if app.satellite_categories is not None and profile.satellite_category not in app.satellite_categories:
        return False
    if app.min_mass_kg is not None and profile.satellite_mass_kg < app.min_mass_kg:
        return False

    if profile.altitude_km is not None:
        if app.max_altitude_km is not None and profile.altitude_km > app.max_altitude_km:
            return False
        if app.min_altitude_km is not None and profile.altitude_km < app.min_altitude_km:
            return False

    if app.constellations_only and profile.is_constellation is False:
        return False
    if app.requires_propulsion and profile.has_propulsion is False:
        return False

    return True


def filter_guidelines(guidelines: Iterable[Guideline], profile: MissionProfile) -> List[Guideline]:
    return [g for g in guidelines if guideline_applies(g, profile)]
