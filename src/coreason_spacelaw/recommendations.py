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
Rule-ordered recommendations.

Every rule reads the same shared input and never the output of another rule,
so rules can be added, removed or reordered without hidden coupling.
"""

from typing import Callable, List, Sequence, Tuple

from coreason_spacelaw.schema import (
    ComplianceScore,
    ComplianceStatus,
    GapAnalysisItem,
    GapPriority,
    GuidelineCategory,
    JurisdictionResult,
    LicensingStatus,
    MissionProfile,
    OrbitRegime,
    SpaceLawAssessmentAnswers,
)

SpaceLawRule = Callable[[Sequence[JurisdictionResult], SpaceLawAssessmentAnswers], List[str]]
GuidelineRule = Callable[[MissionProfile, ComplianceScore, Sequence[GapAnalysisItem]], List[str]]

CONSTELLATION_THRESHOLD = 9


# National Space Law Rules


def top_jurisdiction(results: Sequence[JurisdictionResult], answers: SpaceLawAssessmentAnswers) -> List[str]:
    if len(results) < 2:
        return []
    top = max(results, key=lambda r: r.favorability_score)
    return [
        f"{top.flag_emoji} {top.country_name} scores highest ({top.favorability_score}/100) for your profile. "
        "Consider it as your primary jurisdiction."
    ]


def fastest_timeline(results: Sequence[JurisdictionResult], answers: SpaceLawAssessmentAnswers) -> List[str]:
    if len(results) < 2:
        return []
    ranked = sorted(results, key=lambda r: r.favorability_score, reverse=True)
    # Ties on processing time go to the lower-ranked jurisdiction.
    fastest = min(reversed(ranked), key=lambda r: r.estimated_timeline.average)
    weeks = fastest.estimated_timeline
    return [
        f"For the fastest timeline, {fastest.flag_emoji} {fastest.country_name} offers "
        f"{weeks.min}–{weeks.max} week processing."
    ]


def insurance_reminder(results: Sequence[JurisdictionResult], answers: SpaceLawAssessmentAnswers) -> List[str]:
    if not any(r.insurance.mandatory for r in results):
        return []
    return [
        "Prepare insurance documentation early. Most jurisdictions require mandatory third-party "
        "liability coverage before authorization."
    ]


def harmonization_transition(results: Sequence[JurisdictionResult], answers: SpaceLawAssessmentAnswers) -> List[str]:
    if not any(r.eu_member for r in results):
        return []
    return [
        "Plan for EU Space Act transition by 2030. EU member state national regimes will be harmonized "
        "under the new framework."
    ]


def new_applicant(results: Sequence[JurisdictionResult], answers: SpaceLawAssessmentAnswers) -> List[str]:
    if answers.licensing_status != LicensingStatus.NEW_APPLICATION:
        return []
    return [
        "For new applications, engage with the licensing authority early. Most NCAs offer pre-application "
        "consultations to discuss requirements and timelines."
    ]


def constellation_licensing(results: Sequence[JurisdictionResult], answers: SpaceLawAssessmentAnswers) -> List[str]:
    if answers.constellation_size is None or answers.constellation_size <= CONSTELLATION_THRESHOLD:
        return []
    return [
        "For constellation deployments, inquire about blanket licensing options. Some jurisdictions allow "
        "a single authorization covering multiple identical spacecraft."
    ]


def coverage_advisories(results: Sequence[JurisdictionResult], answers: SpaceLawAssessmentAnswers) -> List[str]:
    return [r.coverage_advisory for r in results if not r.is_applicable and r.coverage_advisory]


SPACE_LAW_RULES: Tuple[SpaceLawRule, ...] = (
    top_jurisdiction,
    fastest_timeline,
    insurance_reminder,
    harmonization_transition,
    new_applicant,
    constellation_licensing,
    coverage_advisories,
)


def generate_space_law_recommendations(
    results: Sequence[JurisdictionResult],
    answers: SpaceLawAssessmentAnswers,
    limit: int = 6,
    rules: Sequence[SpaceLawRule] = SPACE_LAW_RULES,
) -> List[str]:
    if not results:
        return []
    recommendations = [text for rule in rules for text in rule(results, answers)]
    return recommendations[:limit]


# Guideline Rules


def disposal_plan(profile: MissionProfile, score: ComplianceScore, gaps: Sequence[GapAnalysisItem]) -> List[str]:
    if score.by_category.get(GuidelineCategory.DISPOSAL, 100) >= 80:
        return []
    if profile.orbit_regime == OrbitRegime.LEO:
        return [
            "Priority: Develop 25-year deorbit compliance plan as per IADC 5.3.2 and ISO 24113:2024 §6.4.2"
        ]
    if profile.orbit_regime == OrbitRegime.GEO:
        return ["Priority: Ensure propellant budget includes graveyard orbit transfer reserve (~11 m/s)"]
    return []


def collision_avoidance(profile: MissionProfile, score: ComplianceScore, gaps: Sequence[GapAnalysisItem]) -> List[str]:
    if score.by_category.get(GuidelineCategory.COLLISION_AVOIDANCE, 100) >= 70:
        return []
    advice = ["Subscribe to a conjunction warning service (EUSST, LeoLabs, or equivalent)"]
    if profile.has_propulsion:
        advice.append("Develop and document collision avoidance maneuver procedures")
    return advice


def passivation_plan(profile: MissionProfile, score: ComplianceScore, gaps: Sequence[GapAnalysisItem]) -> List[str]:
    if score.by_category.get(GuidelineCategory.DESIGN_PASSIVATION, 100) >= 80:
        return []
    return ["Develop comprehensive passivation plan for all stored energy sources"]


def un_registration(profile: MissionProfile, score: ComplianceScore, gaps: Sequence[GapAnalysisItem]) -> List[str]:
    open_gap = any(g.guideline_id == "copuos-lts-a5" and g.status != ComplianceStatus.COMPLIANT for g in gaps)
    return ["Complete UN space object registration through UNOOSA"] if open_gap else []


def high_priority_gaps(profile: MissionProfile, score: ComplianceScore, gaps: Sequence[GapAnalysisItem]) -> List[str]:
    high = [g for g in gaps if g.priority == GapPriority.HIGH][:3]
    return [f"Address: {g.recommendation}" for g in high]


def constellation_avoidance(
    profile: MissionProfile, score: ComplianceScore, gaps: Sequence[GapAnalysisItem]
) -> List[str]:
    large_constellation = profile.is_constellation and (profile.constellation_size or 0) > 10
    if not large_constellation or score.by_category.get(GuidelineCategory.COLLISION_AVOIDANCE, 100) >= 90:
        return []
    return ["Implement automated constellation-wide collision avoidance system"]


GUIDELINE_RULES: Tuple[GuidelineRule, ...] = (
    disposal_plan,
    collision_avoidance,
    passivation_plan,
    un_registration,
    high_priority_gaps,
    constellation_avoidance,
)


def generate_guideline_recommendations(
    profile: MissionProfile,
    score: ComplianceScore,
    gaps: Sequence[GapAnalysisItem],
    limit: int = 8,
    rules: Sequence[GuidelineRule] = GUIDELINE_RULES,
) -> List[str]:
    recommendations = [text for rule in rules for text in rule(profile, score, gaps)]
    return recommendations[:limit]
