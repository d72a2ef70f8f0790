# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_spacelaw

from typing import Optional

from coreason_spacelaw.schema import (
    ActivityType,
    ApplicabilityDecision,
    ApplicabilityRule,
    EntityNationality,
    JurisdictionLaw,
    SpaceLawAssessmentAnswers,
)


def _rule_in_scope(
    rule: ApplicabilityRule,
    activity_type: Optional[ActivityType],
    nationality: Optional[EntityNationality],
) -> bool:
    """An undeclared answer matches any scope."""
    if activity_type is not None and rule.activity_types is not None and activity_type not in rule.activity_types:
        return False
    if nationality is not None and rule.entity_types is not None and nationality not in rule.entity_types:
        return False
    return True


def resolve_applicability(law: JurisdictionLaw, answers: SpaceLawAssessmentAnswers) -> ApplicabilityDecision:
    """
    Decide whether a jurisdiction's law binds the declared profile.

    Checks run in order and the first decisive one wins:
    1. Coverage exception (a jurisdiction whose law only covers a narrow set of activities).
    2. Activity coverage: no requirement lists the declared activity.
    3. Applicability rules in declaration order; the first in-scope rule with applies=False rejects.
    4. Otherwise applicable under the governing legislation.
    """
    activity_type = answers.activity_type

    exception = law.coverage_exception
    if exception is not None and activity_type not in exception.covered_activities:
        return ApplicabilityDecision(is_applicable=False, reason=exception.reason)

    if activity_type is not None:
        covered = any(activity_type in req.applicable_to for req in law.licensing_requirements)
        if not covered:
            return ApplicabilityDecision(
                is_applicable=False,
                reason=(
                    f"{law.country_name}'s space law does not specifically address this activity type. "
                    "Additional regulatory consultation may be needed."
                ),
            )

    for rule in law.applicability_rules:
        if not _rule_in_scope(rule, activity_type, answers.entity_nationality):
            continue
        if not rule.applies:
            return ApplicabilityDecision(is_applicable=False, reason=rule.description)

    return ApplicabilityDecision(
        is_applicable=True,
        reason=f"Authorization required under {law.legislation.name}.",
    )
