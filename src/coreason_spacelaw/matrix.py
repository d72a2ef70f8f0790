# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_spacelaw

"""
Side-by-side comparison of jurisdictions.

Each criterion derives its cell from one jurisdiction record alone, so criteria
can be evaluated in any order and adding a column never changes another.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from coreason_spacelaw.schema import (
    ComparisonCriterion,
    ComparisonMatrix,
    CriterionCategory,
    CriterionValue,
    CrossReferenceRelationship,
    JurisdictionLaw,
    JurisdictionResult,
    LegislationStatus,
    LiabilityRegime,
)
from coreason_spacelaw.scoring import current_reference_year

CellFunction = Callable[[JurisdictionLaw, int], CriterionValue]


@dataclass(frozen=True)
class CriterionSpec:
    id: str
    label: str
    category: CriterionCategory
    evaluate: CellFunction


def processing_time_cell(law: JurisdictionLaw, year: int) -> CriterionValue:
    weeks = law.timeline.typical_processing_weeks
    avg = weeks.average
    if avg <= 10:
        score = 5
    elif avg <= 14:
        score = 4
    elif avg <= 18:
        score = 3
    elif avg <= 24:
        score = 2
    else:
        score = 1
    return CriterionValue(value=f"{weeks.min}–{weeks.max} weeks", score=score)


def application_fee_cell(law: JurisdictionLaw, year: int) -> CriterionValue:
    fee = law.timeline.application_fee or "Not specified"
    score = 5 if fee in ("Not specified", "None") else 3
    return CriterionValue(value=fee, score=score)


def minimum_insurance_cell(law: JurisdictionLaw, year: int) -> CriterionValue:
    insurance = law.insurance_liability
    if not insurance.mandatory_insurance:
        return CriterionValue(value="Not mandatory", score=5)
    return CriterionValue(value=insurance.minimum_coverage or "Case-by-case", score=3)


def indemnification_cell(law: JurisdictionLaw, year: int) -> CriterionValue:
    if law.insurance_liability.government_indemnification:
        return CriterionValue(value="Yes", score=5)
    return CriterionValue(value="No", score=2)


LIABILITY_SCORES: Dict[LiabilityRegime, int] = {
    LiabilityRegime.CAPPED: 5,
    LiabilityRegime.NEGOTIABLE: 4,
    LiabilityRegime.TIERED: 3,
    LiabilityRegime.UNLIMITED: 2,
}


def liability_regime_cell(law: JurisdictionLaw, year: int) -> CriterionValue:
    regime = law.insurance_liability.liability_regime
    return CriterionValue(value=regime.value.capitalize(), score=LIABILITY_SCORES[regime])


def deorbit_cell(law: JurisdictionLaw, year: int) -> CriterionValue:
    debris = law.debris_mitigation
    if not debris.deorbit_requirement:
        return CriterionValue(value="No requirement", score=4)
    return CriterionValue(value=debris.deorbit_timeline or "Required", score=3)


def debris_plan_cell(law: JurisdictionLaw, year: int) -> CriterionValue:
    value = "Mandatory" if law.debris_mitigation.debris_mitigation_plan else "Not required"
    return CriterionValue(value=value, score=3)


def regulatory_maturity_cell(law: JurisdictionLaw, year: int) -> CriterionValue:
    if law.legislation.status == LegislationStatus.NONE:
        return CriterionValue(value="No law", score=1)
    age = year - law.legislation.year_enacted
    if age >= 15:
        return CriterionValue(value="Very mature", score=5)
    if age >= 8:
        return CriterionValue(value="Mature", score=4)
    if age >= 4:
        return CriterionValue(value="Established", score=3)
    return CriterionValue(value="Recent", score=2)


def remote_sensing_cell(law: JurisdictionLaw, year: int) -> CriterionValue:
    if law.data_sensing.remote_sensing_license:
        return CriterionValue(value="Required", score=3)
    return CriterionValue(value="Not required", score=4)


HARMONIZATION_CELLS: Dict[CrossReferenceRelationship, CriterionValue] = {
    CrossReferenceRelationship.COMPLEMENTARY: CriterionValue(value="Complementary", score=5),
    CrossReferenceRelationship.PARALLEL: CriterionValue(value="Independent", score=4),
    CrossReferenceRelationship.SUPERSEDED: CriterionValue(value="Will be superseded", score=3),
    CrossReferenceRelationship.GAP: CriterionValue(value="Fills regulatory gap", score=2),
}


def harmonization_cell(law: JurisdictionLaw, year: int) -> CriterionValue:
    cross_ref = law.eu_space_act_cross_ref
    cell = HARMONIZATION_CELLS[cross_ref.relationship]
    return cell.model_copy(update={"notes": cross_ref.transition_notes})


CRITERIA: Tuple[CriterionSpec, ...] = (
    CriterionSpec("processing_time", "Processing Time", CriterionCategory.TIMELINE, processing_time_cell),
    CriterionSpec("application_fee", "Application Fee", CriterionCategory.COST, application_fee_cell),
    CriterionSpec("insurance_min", "Min. Insurance", CriterionCategory.INSURANCE, minimum_insurance_cell),
    CriterionSpec("govt_indemnification", "Govt. Indemnification", CriterionCategory.INSURANCE, indemnification_cell),
    CriterionSpec("liability_regime", "Liability Regime", CriterionCategory.LIABILITY, liability_regime_cell),
    CriterionSpec("deorbit_timeline", "Deorbit Requirement", CriterionCategory.DEBRIS, deorbit_cell),
    CriterionSpec("debris_plan", "Debris Mitigation Plan", CriterionCategory.DEBRIS, debris_plan_cell),
    CriterionSpec("regulatory_maturity", "Regulatory Maturity", CriterionCategory.REGULATORY, regulatory_maturity_cell),
    CriterionSpec("remote_sensing", "Remote Sensing License", CriterionCategory.REGULATORY, remote_sensing_cell),
    CriterionSpec("eu_space_act", "EU Space Act Impact", CriterionCategory.REGULATORY, harmonization_cell),
)


def build_criterion(spec: CriterionSpec, laws: Iterable[JurisdictionLaw], year: int) -> ComparisonCriterion:
    values = {law.country_code: spec.evaluate(law, year) for law in laws}
    return ComparisonCriterion(id=spec.id, label=spec.label, category=spec.category, jurisdiction_values=values)


def build_comparison_matrix(
    results: Iterable[JurisdictionResult],
    laws: Dict[str, JurisdictionLaw],
    reference_year: Optional[int] = None,
    criteria: Iterable[CriterionSpec] = CRITERIA,
) -> ComparisonMatrix:
    """
    Project every criterion across the jurisdictions that produced a result.
    Codes without a reference record are left out of the table.
    """
    year = reference_year if reference_year is not None else current_reference_year()
    selected: List[JurisdictionLaw] = [laws[r.country_code] for r in results if r.country_code in laws]
    if not selected:
        return ComparisonMatrix(criteria=[])
    return ComparisonMatrix(criteria=[build_criterion(spec, selected, year) for spec in criteria])
