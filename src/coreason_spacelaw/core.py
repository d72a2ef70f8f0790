# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_spacelaw

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from coreason_spacelaw.applicability import resolve_applicability
from coreason_spacelaw.archive import ReferenceArchive
from coreason_spacelaw.config import Settings
from coreason_spacelaw.config import settings as default_settings
from coreason_spacelaw.crossref import build_eu_space_act_preview, find_eu_space_act_overlaps
from coreason_spacelaw.exceptions import ProfileValidationError
from coreason_spacelaw.gaps import analyze_gaps, summarize_compliance
from coreason_spacelaw.matrix import build_comparison_matrix
from coreason_spacelaw.recommendations import (
    generate_guideline_recommendations,
    generate_space_law_recommendations,
)
from coreason_spacelaw.requirements import count_mandatory, filter_guidelines, filter_requirements
from coreason_spacelaw.schema import (
    AuthorityInfo,
    DebrisSummary,
    GuidelineAssessment,
    GuidelineAssessmentResult,
    InsuranceSummary,
    JurisdictionLaw,
    JurisdictionResult,
    LegislationSummary,
    MissionProfile,
    PolicyStatus,
    RedactedJurisdictionResult,
    RedactedSpaceLawResult,
    SpaceLawAssessmentAnswers,
    SpaceLawComplianceResult,
    Timeline,
)
from coreason_spacelaw.scoring import (
    calculate_compliance_score,
    determine_risk_level,
    score_favorability,
    score_policy_statuses,
)
from coreason_spacelaw.utils.logger import logger

FEE_FALLBACK = "Contact authority for fee schedule"


def format_cost_estimate(timeline: Timeline) -> str:
    parts = []
    if timeline.application_fee:
        parts.append(f"Application: {timeline.application_fee}")
    if timeline.annual_fee:
        parts.append(f"Annual: {timeline.annual_fee}")
    return " · ".join(parts) if parts else FEE_FALLBACK


def validate_mission_profile(data: Mapping[str, Any]) -> MissionProfile:
    """
    Parse caller-supplied profile data into a MissionProfile.

    :raises ProfileValidationError: If a required field is absent or a value is invalid.
    """
    try:
        return MissionProfile(**data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'profile'}: {err['msg']}" for err in e.errors()
        )
        logger.warning(f"Rejected mission profile: {problems}")
        raise ProfileValidationError(f"Invalid mission profile: {problems}") from e


def redact_space_law_result(result: SpaceLawComplianceResult) -> RedactedSpaceLawResult:
    """Replace the full requirement records of each jurisdiction with their count."""
    redacted = []
    for jurisdiction in result.jurisdictions:
        fields = jurisdiction.model_dump(exclude={"applicable_requirements"})
        redacted.append(
            RedactedJurisdictionResult(**fields, requirement_count=len(jurisdiction.applicable_requirements))
        )
    return RedactedSpaceLawResult(
        jurisdictions=redacted,
        comparison_matrix=result.comparison_matrix,
        eu_space_act_preview=result.eu_space_act_preview,
        recommendations=list(result.recommendations),
    )


class ComplianceEngine:
    """
    The central orchestration engine for regulatory compliance scoring.

    It reads only from an immutable ReferenceArchive and builds fresh result
    objects on every call, so one engine may serve concurrent requests.
    """

    def __init__(self, archive: ReferenceArchive, settings: Optional[Settings] = None) -> None:
        """
        Initialize the engine.

        :param archive: Source of jurisdiction laws, guidelines and cross-references.
        :param settings: Runtime limits and reference year. Defaults to the process settings.
        """
        self.archive = archive
        self.settings = settings or default_settings

    @classmethod
    def from_settings(cls, settings: Settings) -> "ComplianceEngine":
        """Build an engine over a fresh archive loaded from the settings' data_dir."""
        archive = ReferenceArchive()
        archive.load_defaults(settings.data_dir)
        return cls(archive, settings)

    def evaluate_jurisdiction(self, law: JurisdictionLaw, answers: SpaceLawAssessmentAnswers) -> JurisdictionResult:
        decision = resolve_applicability(law, answers)
        requirements = filter_requirements(law.licensing_requirements, answers.activity_type)
        favorability = score_favorability(law, answers, self.settings.reference_year)

        advisory = None
        exception = law.coverage_exception
        if exception is not None and answers.activity_type not in exception.covered_activities:
            advisory = exception.advisory

        insurance = law.insurance_liability
        debris = law.debris_mitigation
        return JurisdictionResult(
            country_code=law.country_code,
            country_name=law.country_name,
            flag_emoji=law.flag_emoji,
            eu_member=law.eu_member,
            is_applicable=decision.is_applicable,
            applicability_reason=decision.reason,
            total_requirements=len(requirements),
            mandatory_requirements=count_mandatory(requirements),
            applicable_requirements=requirements,
            authority=AuthorityInfo(
                name=law.licensing_authority.name,
                website=law.licensing_authority.website,
                contact_email=law.licensing_authority.contact_email,
            ),
            estimated_timeline=law.timeline.typical_processing_weeks,
            estimated_cost=format_cost_estimate(law.timeline),
            insurance=InsuranceSummary(
                mandatory=insurance.mandatory_insurance,
                minimum_coverage=insurance.minimum_coverage or "Case-by-case",
                government_indemnification=insurance.government_indemnification,
            ),
            debris=DebrisSummary(
                deorbit_required=debris.deorbit_requirement,
                deorbit_timeline=debris.deorbit_timeline or "Not specified",
                mitigation_plan=debris.debris_mitigation_plan,
            ),
            legislation=LegislationSummary(
                name=law.legislation.name,
                status=law.legislation.status,
                year_enacted=law.legislation.year_enacted,
            ),
            favorability_score=favorability.score,
            favorability_factors=list(favorability.factors),
            coverage_advisory=advisory,
        )

    def assess_space_law(self, answers: SpaceLawAssessmentAnswers) -> SpaceLawComplianceResult:
        """
        Assess every selected jurisdiction against the declared profile.

        1. Resolve each selected code; unknown codes are dropped, not fatal.
        2. Per jurisdiction: applicability, requirement filter, favorability.
        3. Comparison matrix and EU Space Act preview across the survivors.
        4. Rule-ordered recommendations.

        :param answers: The validated questionnaire answers.
        :return: The aggregate result. Empty when no selected code resolves.
        """
        laws: Dict[str, JurisdictionLaw] = {}
        for code in answers.selected_jurisdictions:
            law = self.archive.get_jurisdiction(code)
            if law is None:
                logger.warning(f"ComplianceEngine: Unknown jurisdiction code '{code}' dropped from assessment.")
                continue
            laws.setdefault(code, law)

        results = [self.evaluate_jurisdiction(law, answers) for law in laws.values()]

        matrix = build_comparison_matrix(results, laws, reference_year=self.settings.reference_year)
        preview = build_eu_space_act_preview(
            laws.keys(),
            laws,
            self.archive.get_cross_references(),
            limit=self.settings.cross_reference_limit,
        )
        recommendations = generate_space_law_recommendations(
            results, answers, limit=self.settings.recommendation_limit
        )

        logger.info(
            f"ComplianceEngine: Assessed {len(results)} of {len(answers.selected_jurisdictions)} "
            f"selected jurisdictions ({sum(r.is_applicable for r in results)} applicable)."
        )
        return SpaceLawComplianceResult(
            jurisdictions=results,
            comparison_matrix=matrix,
            eu_space_act_preview=preview,
            recommendations=recommendations,
        )

    def assess_guidelines(
        self, profile: MissionProfile, assessments: Iterable[GuidelineAssessment] = ()
    ) -> GuidelineAssessmentResult:
        """
        Score recorded guideline statuses for a mission profile.

        Guidelines the profile excludes are ignored; applicable guidelines
        without a recorded status count as not assessed.
        """
        recorded: List[GuidelineAssessment] = list(assessments)
        all_guidelines = self.archive.get_guidelines()
        applicable = filter_guidelines(all_guidelines, profile)
        applicable_ids = {g.id for g in applicable}
        relevant = [a for a in recorded if a.guideline_id in applicable_ids]

        score = calculate_compliance_score(applicable, relevant)
        gaps = analyze_gaps(applicable, relevant)
        risk_level = determine_risk_level(score, applicable, relevant)
        recommendations = generate_guideline_recommendations(
            profile, score, gaps, limit=self.settings.guideline_recommendation_limit
        )

        logger.info(
            f"ComplianceEngine: {len(applicable)} of {len(all_guidelines)} guidelines apply; "
            f"score {score.overall}, {len(gaps)} gaps, risk {risk_level.value}."
        )
        return GuidelineAssessmentResult(
            profile=profile,
            applicable_guidelines=applicable,
            assessments=relevant,
            score=score,
            gap_analysis=gaps,
            risk_level=risk_level,
            eu_space_act_overlaps=find_eu_space_act_overlaps(applicable),
            recommendations=recommendations,
            summary=summarize_compliance(applicable, relevant, len(all_guidelines)),
        )

    def score_insurance(self, required_types: Sequence[str], statuses: Mapping[str, PolicyStatus]) -> int:
        return score_policy_statuses(required_types, statuses)
