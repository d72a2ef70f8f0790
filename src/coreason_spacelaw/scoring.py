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
Favorability and compliance scoring.

Favorability is a fold over an ordered tuple of rules: every rule that applies
adds its delta to the running score and its label to the explanation trail, so
each point of the final score can be traced back to a named rule.
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from coreason_spacelaw.schema import (
    BindingLevel,
    ComplianceScore,
    ComplianceStatus,
    FavorabilityBonus,
    FavorabilityScore,
    Guideline,
    GuidelineAssessment,
    GuidelineCategory,
    GuidelineSource,
    JurisdictionLaw,
    LegislationStatus,
    LiabilityRegime,
    PolicyStatus,
    RiskLevel,
    Severity,
    SpaceLawAssessmentAnswers,
)

BASELINE_SCORE = 50
NO_LAW_SCORE = 20
NO_LAW_FACTORS = (
    "No comprehensive space law: regulatory uncertainty",
    "EU Space Act (2030) will provide framework",
)

Predicate = Callable[[JurisdictionLaw, SpaceLawAssessmentAnswers, int], bool]


@dataclass(frozen=True)
class FavorabilityRule:
    label: str
    delta: int
    applies: Predicate


def _avg_weeks(law: JurisdictionLaw) -> float:
    return law.timeline.typical_processing_weeks.average


def _regime_is(regime: LiabilityRegime) -> Predicate:
    return lambda law, answers, year: law.insurance_liability.liability_regime == regime


TIMELINE_RULES: Tuple[FavorabilityRule, ...] = (
    FavorabilityRule("Fast licensing timeline", 15, lambda law, answers, year: _avg_weeks(law) <= 10),
    FavorabilityRule("Moderate licensing timeline", 8, lambda law, answers, year: 10 < _avg_weeks(law) <= 16),
    FavorabilityRule("Longer licensing timeline", -5, lambda law, answers, year: _avg_weeks(law) > 16),
)

LIABILITY_RULES: Tuple[FavorabilityRule, ...] = (
    FavorabilityRule(
        "Government indemnification available",
        10,
        lambda law, answers, year: law.insurance_liability.government_indemnification,
    ),
    FavorabilityRule("Capped liability regime", 8, _regime_is(LiabilityRegime.CAPPED)),
    FavorabilityRule("Negotiable liability terms", 5, _regime_is(LiabilityRegime.NEGOTIABLE)),
)

MATURITY_RULES: Tuple[FavorabilityRule, ...] = (
    FavorabilityRule(
        "Mature regulatory framework",
        10,
        lambda law, answers, year: law.legislation.year_enacted <= year - 16,
    ),
    FavorabilityRule(
        "Established regulatory framework",
        5,
        lambda law, answers, year: year - 16 < law.legislation.year_enacted <= year - 8,
    ),
)

REGISTRY_RULES: Tuple[FavorabilityRule, ...] = (
    FavorabilityRule(
        "National space registry maintained",
        3,
        lambda law, answers, year: law.registration.national_registry_exists,
    ),
)


def _bonus_rule(bonus: FavorabilityBonus) -> FavorabilityRule:
    def applies(law: JurisdictionLaw, answers: SpaceLawAssessmentAnswers, year: int) -> bool:
        if bonus.activity_types is not None and answers.activity_type not in bonus.activity_types:
            return False
        if bonus.entity_sizes is not None and answers.entity_size not in bonus.entity_sizes:
            return False
        return True

    return FavorabilityRule(bonus.label, bonus.delta, applies)


def favorability_rules(law: JurisdictionLaw) -> Tuple[FavorabilityRule, ...]:
    """The ordered rule set for one jurisdiction: shared rules plus its own declared provisions."""
    bonuses = tuple(_bonus_rule(b) for b in law.favorability_bonuses)
    return TIMELINE_RULES + LIABILITY_RULES + MATURITY_RULES + bonuses + REGISTRY_RULES


def current_reference_year() -> int:
    return date.today().year


def score_favorability(
    law: JurisdictionLaw,
    answers: SpaceLawAssessmentAnswers,
    reference_year: Optional[int] = None,
) -> FavorabilityScore:
    """
    Compute a 0-100 favorability score with its explanation trail.
    A jurisdiction without comprehensive legislation scores a fixed floor.
    """
    if law.legislation.status == LegislationStatus.NONE:
        return FavorabilityScore(score=NO_LAW_SCORE, factors=NO_LAW_FACTORS)

    year = reference_year if reference_year is not None else current_reference_year()
    score = BASELINE_SCORE
    factors: List[str] = []
    for rule in favorability_rules(law):
        if rule.applies(law, answers, year):
            score += rule.delta
            factors.append(rule.label)

    return FavorabilityScore(score=max(0, min(100, score)), factors=tuple(factors))


# Status-Driven Compliance Scores

# None excludes the item from both numerator and denominator.
GUIDELINE_STATUS_POINTS: Dict[ComplianceStatus, Optional[int]] = {
    ComplianceStatus.COMPLIANT: 100,
    ComplianceStatus.PARTIAL: 50,
    ComplianceStatus.NON_COMPLIANT: 0,
    ComplianceStatus.NOT_ASSESSED: 0,
    ComplianceStatus.NOT_APPLICABLE: None,
}

POLICY_STATUS_POINTS: Dict[PolicyStatus, Optional[int]] = {
    PolicyStatus.ACTIVE: 100,
    PolicyStatus.BOUND: 100,
    PolicyStatus.EXPIRING_SOON: 80,
    PolicyStatus.UNDER_REVIEW: 60,
    PolicyStatus.QUOTE_RECEIVED: 40,
    PolicyStatus.QUOTE_REQUESTED: 20,
    PolicyStatus.NOT_STARTED: 0,
    PolicyStatus.EXPIRED: 0,
    PolicyStatus.NOT_REQUIRED: None,
}

BINDING_WEIGHTS: Dict[BindingLevel, int] = {
    BindingLevel.MANDATORY: 3,
    BindingLevel.RECOMMENDED: 2,
    BindingLevel.BEST_PRACTICE: 1,
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def weighted_score(items: Iterable[Tuple[int, Optional[int]]]) -> int:
    """
    Weighted average of (weight, points) pairs on a 0-100 scale.
    Pairs with points=None are excluded; an empty set scores 100.
    """
    total_weight = 0
    achieved = 0
    for weight, points in items:
        if points is None:
            continue
        total_weight += weight
        achieved += weight * points
    if total_weight == 0:
        return 100
    return _round_half_up(achieved / total_weight)


def status_map(assessments: Iterable[GuidelineAssessment]) -> Dict[str, ComplianceStatus]:
    """Latest recorded status per guideline id."""
    return {a.guideline_id: a.status for a in assessments}


def _group_score(guidelines: Iterable[Guideline], statuses: Mapping[str, ComplianceStatus]) -> int:
    return weighted_score(
        (
            BINDING_WEIGHTS[g.binding_level],
            GUIDELINE_STATUS_POINTS[statuses.get(g.id, ComplianceStatus.NOT_ASSESSED)],
        )
        for g in guidelines
    )


def calculate_compliance_score(
    guidelines: Sequence[Guideline], assessments: Iterable[GuidelineAssessment]
) -> ComplianceScore:
    statuses = status_map(assessments)

    by_source = {
        source: _group_score([g for g in guidelines if g.source == source], statuses) for source in GuidelineSource
    }
    by_category = {
        category: _group_score([g for g in guidelines if g.category == category], statuses)
        for category in GuidelineCategory
    }

    return ComplianceScore(
        overall=_group_score(guidelines, statuses),
        by_source=by_source,
        by_category=by_category,
        mandatory=_group_score([g for g in guidelines if g.binding_level == BindingLevel.MANDATORY], statuses),
        recommended=_group_score([g for g in guidelines if g.binding_level != BindingLevel.MANDATORY], statuses),
    )


def score_policy_statuses(required_types: Sequence[str], statuses: Mapping[str, PolicyStatus]) -> int:
    """Insurance variant: every required policy type carries equal weight."""
    return weighted_score(
        (1, POLICY_STATUS_POINTS[statuses.get(policy_type, PolicyStatus.NOT_STARTED)]) for policy_type in required_types
    )


def determine_risk_level(
    score: ComplianceScore,
    guidelines: Sequence[Guideline],
    assessments: Iterable[GuidelineAssessment],
) -> RiskLevel:
    statuses = status_map(assessments)
    critical_breach = any(
        g.severity == Severity.CRITICAL and statuses.get(g.id) == ComplianceStatus.NON_COMPLIANT for g in guidelines
    )
    if critical_breach:
        return RiskLevel.CRITICAL

    if score.mandatory < 50:
        return RiskLevel.CRITICAL
    if score.mandatory < 70:
        return RiskLevel.HIGH
    if score.mandatory < 85:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW
