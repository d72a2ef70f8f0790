# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_spacelaw

from typing import Dict, Iterable, List, Optional, Sequence

from coreason_spacelaw.schema import (
    BindingLevel,
    ComplianceStatus,
    ComplianceSummary,
    Effort,
    GapAnalysisItem,
    GapPriority,
    Guideline,
    GuidelineAssessment,
    GuidelineCategory,
    Severity,
)
from coreason_spacelaw.scoring import status_map

DEFICIENT_STATUSES = frozenset(
    {ComplianceStatus.NON_COMPLIANT, ComplianceStatus.NOT_ASSESSED, ComplianceStatus.PARTIAL}
)

PRIORITY_ORDER: Dict[GapPriority, int] = {GapPriority.HIGH: 0, GapPriority.MEDIUM: 1, GapPriority.LOW: 2}

HIGH_EFFORT_CATEGORIES = frozenset({GuidelineCategory.DESIGN_PASSIVATION, GuidelineCategory.DISPOSAL})
LOW_EFFORT_CATEGORIES = frozenset({GuidelineCategory.POLICY_REGULATORY, GuidelineCategory.INTERNATIONAL_COOPERATION})


def gap_priority(guideline: Guideline) -> Optional[GapPriority]:
    """Priority of an open gap, or None when the gap is too minor to report."""
    if guideline.binding_level == BindingLevel.MANDATORY or guideline.severity == Severity.CRITICAL:
        return GapPriority.HIGH
    if guideline.severity == Severity.MAJOR:
        return GapPriority.MEDIUM
    return None


def estimate_effort(guideline: Guideline) -> Effort:
    if guideline.category in HIGH_EFFORT_CATEGORIES:
        return Effort.HIGH
    if guideline.category in LOW_EFFORT_CATEGORIES:
        return Effort.LOW
    return Effort.MEDIUM


def describe_gap(guideline: Guideline, status: ComplianceStatus) -> str:
    label = f"{guideline.reference_number}: {guideline.title}"
    if status == ComplianceStatus.NON_COMPLIANT:
        return f"Non-compliant with {label}"
    if status == ComplianceStatus.PARTIAL:
        return f"Partially compliant with {label}"
    return f"Not yet assessed: {label}"


def gap_dependencies(guideline: Guideline) -> List[str]:
    dependencies: List[str] = []
    if guideline.category == GuidelineCategory.COLLISION_AVOIDANCE and not guideline.applicability.requires_propulsion:
        dependencies.append("Propulsion system capability")
    if guideline.category == GuidelineCategory.DISPOSAL:
        dependencies.append("Passivation capability (IADC 5.3.1)")
    return dependencies


def analyze_gaps(guidelines: Iterable[Guideline], assessments: Iterable[GuidelineAssessment]) -> List[GapAnalysisItem]:
    """
    Build the sorted gap list for applicable guidelines.

    A guideline without a recorded status counts as not assessed. Only deficient
    guidelines with a reportable priority produce a gap; the result is ordered by
    priority, then guideline id, so identical input always yields the same report.
    """
    statuses = status_map(assessments)
    gaps: List[GapAnalysisItem] = []

    for guideline in guidelines:
        status = statuses.get(guideline.id, ComplianceStatus.NOT_ASSESSED)
        if status not in DEFICIENT_STATUSES:
            continue

        priority = gap_priority(guideline)
        if priority is None:
            continue

        if guideline.implementation_guidance:
            recommendation = guideline.implementation_guidance[0]
        else:
            recommendation = f"Review and implement {guideline.title}"

        gaps.append(
            GapAnalysisItem(
                guideline_id=guideline.id,
                status=status,
                priority=priority,
                gap=describe_gap(guideline, status),
                recommendation=recommendation,
                estimated_effort=estimate_effort(guideline),
                dependencies=gap_dependencies(guideline),
            )
        )

    return sorted(gaps, key=lambda g: (PRIORITY_ORDER[g.priority], g.guideline_id))


def summarize_compliance(
    guidelines: Sequence[Guideline],
    assessments: Iterable[GuidelineAssessment],
    total_guidelines: int,
) -> ComplianceSummary:
    statuses = status_map(assessments)
    counts: Dict[ComplianceStatus, int] = {status: 0 for status in ComplianceStatus}
    critical_gaps = 0
    major_gaps = 0

    for guideline in guidelines:
        status = statuses.get(guideline.id, ComplianceStatus.NOT_ASSESSED)
        counts[status] += 1
        if status in DEFICIENT_STATUSES:
            if guideline.severity == Severity.CRITICAL:
                critical_gaps += 1
            elif guideline.severity == Severity.MAJOR:
                major_gaps += 1

    return ComplianceSummary(
        total_guidelines=total_guidelines,
        applicable=len(guidelines),
        compliant=counts[ComplianceStatus.COMPLIANT],
        partial=counts[ComplianceStatus.PARTIAL],
        non_compliant=counts[ComplianceStatus.NON_COMPLIANT],
        not_assessed=counts[ComplianceStatus.NOT_ASSESSED],
        not_applicable=counts[ComplianceStatus.NOT_APPLICABLE],
        critical_gaps=critical_gaps,
        major_gaps=major_gaps,
    )
