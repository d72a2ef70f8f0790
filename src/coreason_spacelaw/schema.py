# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_spacelaw

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

# Enumerations


class ActivityType(str, Enum):
    SPACECRAFT_OPERATION = "spacecraft_operation"
    LAUNCH_VEHICLE = "launch_vehicle"
    LAUNCH_SITE = "launch_site"
    IN_ORBIT_SERVICES = "in_orbit_services"
    EARTH_OBSERVATION = "earth_observation"
    SATELLITE_COMMUNICATIONS = "satellite_communications"
    SPACE_RESOURCES = "space_resources"


class EntityNationality(str, Enum):
    DOMESTIC = "domestic"
    EU_OTHER = "eu_other"
    NON_EU = "non_eu"
    ESA_MEMBER = "esa_member"


class EntitySize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class PrimaryOrbit(str, Enum):
    LEO = "LEO"
    MEO = "MEO"
    GEO = "GEO"
    BEYOND = "beyond"


class LicensingStatus(str, Enum):
    NEW_APPLICATION = "new_application"
    EXISTING_LICENSE = "existing_license"
    RENEWAL = "renewal"
    PRE_ASSESSMENT = "pre_assessment"


class LegislationStatus(str, Enum):
    ENACTED = "enacted"
    DRAFT = "draft"
    PENDING = "pending"
    NONE = "none"


class LiabilityRegime(str, Enum):
    UNLIMITED = "unlimited"
    CAPPED = "capped"
    TIERED = "tiered"
    NEGOTIABLE = "negotiable"


class CrossReferenceRelationship(str, Enum):
    SUPERSEDED = "superseded"
    COMPLEMENTARY = "complementary"
    PARALLEL = "parallel"
    GAP = "gap"


class RequirementCategory(str, Enum):
    TECHNICAL_ASSESSMENT = "technical_assessment"
    FINANCIAL_GUARANTEE = "financial_guarantee"
    INSURANCE = "insurance"
    DEBRIS_PLAN = "debris_plan"
    SAFETY_ASSESSMENT = "safety_assessment"
    ENVIRONMENTAL_ASSESSMENT = "environmental_assessment"
    CORPORATE_GOVERNANCE = "corporate_governance"
    SECURITY_CLEARANCE = "security_clearance"
    FREQUENCY_COORDINATION = "frequency_coordination"
    DATA_HANDLING = "data_handling"
    END_OF_LIFE_PLAN = "end_of_life_plan"
    LIABILITY_COVERAGE = "liability_coverage"
    OPERATIONAL_PLAN = "operational_plan"
    NOTIFICATION = "notification"


class CriterionCategory(str, Enum):
    TIMELINE = "timeline"
    COST = "cost"
    INSURANCE = "insurance"
    DEBRIS = "debris"
    REGULATORY = "regulatory"
    LIABILITY = "liability"


class OrbitRegime(str, Enum):
    LEO = "LEO"
    MEO = "MEO"
    GEO = "GEO"
    HEO = "HEO"
    GTO = "GTO"
    CISLUNAR = "cislunar"
    DEEP_SPACE = "deep_space"


class MissionType(str, Enum):
    COMMERCIAL = "commercial"
    SCIENTIFIC = "scientific"
    GOVERNMENTAL = "governmental"
    EDUCATIONAL = "educational"
    MILITARY = "military"


class SatelliteCategory(str, Enum):
    CUBESAT = "cubesat"
    SMALLSAT = "smallsat"
    MEDIUM = "medium"
    LARGE = "large"
    MEGA = "mega"


class GuidelineSource(str, Enum):
    COPUOS = "COPUOS"
    IADC = "IADC"
    ISO = "ISO"


class GuidelineCategory(str, Enum):
    POLICY_REGULATORY = "policy_regulatory"
    SAFETY_OPERATIONS = "safety_operations"
    INTERNATIONAL_COOPERATION = "international_cooperation"
    SCIENCE_RESEARCH = "science_research"
    SPACE_DEBRIS = "space_debris"
    SPACE_WEATHER = "space_weather"
    DESIGN_PASSIVATION = "design_passivation"
    COLLISION_AVOIDANCE = "collision_avoidance"
    DISPOSAL = "disposal"
    TRACKING_MONITORING = "tracking_monitoring"


class BindingLevel(str, Enum):
    MANDATORY = "mandatory"
    RECOMMENDED = "recommended"
    BEST_PRACTICE = "best_practice"


class Severity(str, Enum):
    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"


class ComplianceStatus(str, Enum):
    COMPLIANT = "compliant"
    PARTIAL = "partial"
    NON_COMPLIANT = "non_compliant"
    NOT_ASSESSED = "not_assessed"
    NOT_APPLICABLE = "not_applicable"


class PolicyStatus(str, Enum):
    NOT_STARTED = "not_started"
    QUOTE_REQUESTED = "quote_requested"
    QUOTE_RECEIVED = "quote_received"
    UNDER_REVIEW = "under_review"
    BOUND = "bound"
    ACTIVE = "active"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"
    NOT_REQUIRED = "not_required"


class GapPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Effort(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class _Record(BaseModel):
    """Immutable record; derived values are produced as new objects, never by mutation."""

    model_config = ConfigDict(frozen=True)


# Reference Data: National Space Laws


class LicensingRequirement(_Record):
    id: str = Field(..., min_length=1, description="Stable requirement identifier (e.g. 'fr-insurance')")
    category: RequirementCategory
    title: str = Field(..., min_length=1)
    description: str
    mandatory: bool
    applicable_to: Tuple[ActivityType, ...] = Field(..., description="Activity types this requirement binds")
    details: Tuple[str, ...] = ()
    article_ref: Optional[str] = None


class ApplicabilityRule(_Record):
    id: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    condition: str
    applies: bool
    activity_types: Optional[Tuple[ActivityType, ...]] = Field(
        default=None, description="Scopes the rule to these activities; None matches any"
    )
    entity_types: Optional[Tuple[EntityNationality, ...]] = Field(
        default=None, description="Scopes the rule to these nationalities; None matches any"
    )
    article_ref: Optional[str] = None


class Legislation(_Record):
    name: str
    name_local: str
    year_enacted: int
    year_amended: Optional[int] = None
    status: LegislationStatus
    official_url: Optional[str] = None
    key_articles: Optional[str] = None


class LicensingAuthority(_Record):
    name: str
    name_local: str
    website: str
    contact_email: str
    parent_ministry: Optional[str] = None


class InsuranceLiability(_Record):
    mandatory_insurance: bool
    minimum_coverage: Optional[str] = None
    coverage_formula: Optional[str] = None
    government_indemnification: bool
    indemnification_cap: Optional[str] = None
    liability_regime: LiabilityRegime
    liability_cap: Optional[str] = None
    third_party_required: bool


class DebrisMitigation(_Record):
    deorbit_requirement: bool
    deorbit_timeline: Optional[str] = None
    passivation_required: bool
    debris_mitigation_plan: bool
    collision_avoidance: bool
    standards: Tuple[str, ...] = ()


class DataSensing(_Record):
    remote_sensing_license: bool
    data_distribution_restrictions: bool
    resolution_restrictions: Optional[str] = None
    data_policy_url: Optional[str] = None


class ProcessingWeeks(_Record):
    min: int = Field(..., ge=0)
    max: int = Field(..., ge=0)

    @model_validator(mode="after")
    def check_range(self) -> "ProcessingWeeks":
        if self.max < self.min:
            raise ValueError(f"Processing range is inverted: {self.min} > {self.max}")
        return self

    @property
    def average(self) -> float:
        return (self.min + self.max) / 2


class Timeline(_Record):
    typical_processing_weeks: ProcessingWeeks
    application_fee: Optional[str] = None
    annual_fee: Optional[str] = None
    other_costs: Tuple[str, ...] = ()


class Registration(_Record):
    national_registry_exists: bool
    registry_name: Optional[str] = None
    un_registration_required: bool


class EUSpaceActCrossRef(_Record):
    relationship: CrossReferenceRelationship
    description: str
    key_articles: Tuple[str, ...] = ()
    transition_notes: Optional[str] = None


class FavorabilityBonus(_Record):
    """A jurisdiction-specific provision that improves favorability for matching profiles."""

    label: str = Field(..., min_length=1)
    delta: int
    activity_types: Optional[Tuple[ActivityType, ...]] = None
    entity_sizes: Optional[Tuple[EntitySize, ...]] = None


class CoverageException(_Record):
    """Marks a jurisdiction whose law only covers a narrow set of activities."""

    covered_activities: Tuple[ActivityType, ...]
    reason: str = Field(..., min_length=1)
    advisory: Optional[str] = Field(default=None, description="Recommendation text used when the exception applies")


class JurisdictionLaw(_Record):
    country_code: str = Field(..., min_length=2, description="Stable jurisdiction code (e.g. 'FR')")
    country_name: str = Field(..., min_length=1)
    flag_emoji: str = ""
    legislation: Legislation
    licensing_authority: LicensingAuthority
    licensing_requirements: Tuple[LicensingRequirement, ...] = ()
    applicability_rules: Tuple[ApplicabilityRule, ...] = ()
    insurance_liability: InsuranceLiability
    debris_mitigation: DebrisMitigation
    data_sensing: DataSensing
    timeline: Timeline
    registration: Registration
    eu_space_act_cross_ref: EUSpaceActCrossRef
    eu_member: bool = True
    favorability_bonuses: Tuple[FavorabilityBonus, ...] = ()
    coverage_exception: Optional[CoverageException] = None
    notes: Tuple[str, ...] = ()
    last_updated: str


# Reference Data: International Guidelines


class GuidelineApplicability(_Record):
    orbit_regimes: Optional[Tuple[OrbitRegime, ...]] = None
    mission_types: Optional[Tuple[MissionType, ...]] = None
    satellite_categories: Optional[Tuple[SatelliteCategory, ...]] = None
    min_mass_kg: Optional[float] = None
    max_altitude_km: Optional[float] = None
    min_altitude_km: Optional[float] = None
    constellations_only: bool = False
    requires_propulsion: bool = False


class Guideline(_Record):
    id: str = Field(..., min_length=1, description="Stable guideline identifier (e.g. 'iadc-5.3.2-leo')")
    source: GuidelineSource
    reference_number: str
    title: str = Field(..., min_length=1)
    description: str
    category: GuidelineCategory
    binding_level: BindingLevel
    applicability: GuidelineApplicability = Field(default_factory=GuidelineApplicability)
    compliance_question: str = ""
    evidence_required: Tuple[str, ...] = ()
    implementation_guidance: Tuple[str, ...] = ()
    eu_space_act_cross_ref: Tuple[str, ...] = ()
    iso_reference: Optional[str] = None
    iadc_reference: Optional[str] = None
    severity: Severity


class SpaceLawCrossReference(_Record):
    id: str = Field(..., min_length=1)
    national_law_area: str = Field(..., min_length=1)
    eu_space_act_articles: Tuple[str, ...] = ()
    relationship: CrossReferenceRelationship
    description: str
    applicable_countries: Tuple[str, ...] = ()


class ReferenceBundle(BaseModel):
    version: Optional[str] = Field(default=None, description="Version of this reference content set")
    jurisdictions: List[JurisdictionLaw] = Field(default_factory=list)
    guidelines: List[Guideline] = Field(default_factory=list)
    cross_references: List[SpaceLawCrossReference] = Field(default_factory=list)


# Inputs


class SpaceLawAssessmentAnswers(BaseModel):
    model_config = ConfigDict(extra="forbid")

    selected_jurisdictions: List[str] = Field(..., description="Jurisdiction codes to assess, in display order")
    activity_type: Optional[ActivityType] = None
    entity_nationality: Optional[EntityNationality] = None
    entity_size: Optional[EntitySize] = None
    primary_orbit: Optional[PrimaryOrbit] = None
    constellation_size: Optional[int] = Field(default=None, ge=0)
    licensing_status: Optional[LicensingStatus] = None


def satellite_category_for_mass(mass_kg: float) -> SatelliteCategory:
    if mass_kg < 10:
        return SatelliteCategory.CUBESAT
    if mass_kg < 100:
        return SatelliteCategory.SMALLSAT
    if mass_kg < 1000:
        return SatelliteCategory.MEDIUM
    if mass_kg < 5000:
        return SatelliteCategory.LARGE
    return SatelliteCategory.MEGA


class MissionProfile(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    orbit_regime: OrbitRegime
    mission_type: MissionType
    satellite_mass_kg: float = Field(..., gt=0)
    altitude_km: Optional[float] = Field(default=None, gt=0)
    inclination_deg: Optional[float] = Field(default=None, ge=0, le=180)
    has_maneuverability: Optional[bool] = None
    has_propulsion: Optional[bool] = None
    planned_lifetime_years: Optional[float] = Field(default=None, ge=0)
    is_constellation: Optional[bool] = None
    constellation_size: Optional[int] = Field(default=None, ge=0)
    launch_date: Optional[str] = None
    country_of_registry: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def drop_derived_fields(cls, data: Any) -> Any:
        # A dumped profile carries the derived category; it is recomputed from mass.
        if isinstance(data, dict) and "satellite_category" in data:
            data = {k: v for k, v in data.items() if k != "satellite_category"}
        return data

    @computed_field  # type: ignore[prop-decorator]
    @property
    def satellite_category(self) -> SatelliteCategory:
        return satellite_category_for_mass(self.satellite_mass_kg)


class GuidelineAssessment(BaseModel):
    guideline_id: str = Field(..., min_length=1)
    status: ComplianceStatus
    notes: Optional[str] = None
    evidence_notes: Optional[str] = None
    assessed_at: Optional[datetime] = None


# Derived Results: National Space Laws


class ApplicabilityDecision(_Record):
    is_applicable: bool
    reason: str


class FavorabilityScore(_Record):
    score: int = Field(..., ge=0, le=100)
    factors: Tuple[str, ...] = Field(default=(), description="Explanation trail, in application order")


class AuthorityInfo(_Record):
    name: str
    website: str
    contact_email: str


class InsuranceSummary(_Record):
    mandatory: bool
    minimum_coverage: str
    government_indemnification: bool


class DebrisSummary(_Record):
    deorbit_required: bool
    deorbit_timeline: str
    mitigation_plan: bool


class LegislationSummary(_Record):
    name: str
    status: LegislationStatus
    year_enacted: int


class _JurisdictionResultBase(_Record):
    country_code: str
    country_name: str
    flag_emoji: str
    eu_member: bool = True
    is_applicable: bool
    applicability_reason: str
    total_requirements: int = Field(..., ge=0)
    mandatory_requirements: int = Field(..., ge=0)
    authority: AuthorityInfo
    estimated_timeline: ProcessingWeeks
    estimated_cost: str
    insurance: InsuranceSummary
    debris: DebrisSummary
    legislation: LegislationSummary
    favorability_score: int = Field(..., ge=0, le=100)
    favorability_factors: List[str] = Field(default_factory=list)
    coverage_advisory: Optional[str] = Field(
        default=None, description="Advisory for a jurisdiction whose law does not cover the declared activity"
    )


class JurisdictionResult(_JurisdictionResultBase):
    applicable_requirements: List[LicensingRequirement] = Field(default_factory=list)


class RedactedJurisdictionResult(_JurisdictionResultBase):
    requirement_count: int = Field(..., ge=0)


class CriterionValue(_Record):
    value: str
    score: int = Field(..., ge=1, le=5, description="1-5, 5 = most favorable")
    notes: Optional[str] = None


class ComparisonCriterion(_Record):
    id: str
    label: str
    category: CriterionCategory
    jurisdiction_values: Dict[str, CriterionValue] = Field(default_factory=dict)


class ComparisonMatrix(_Record):
    criteria: List[ComparisonCriterion] = Field(default_factory=list)


class JurisdictionNote(_Record):
    relationship: CrossReferenceRelationship
    description: str
    key_changes: List[str] = Field(default_factory=list)


class EUSpaceActPreview(_Record):
    overall_relationship: str
    jurisdiction_notes: Dict[str, JurisdictionNote] = Field(default_factory=dict)


class SpaceLawComplianceResult(_Record):
    jurisdictions: List[JurisdictionResult] = Field(default_factory=list)
    comparison_matrix: ComparisonMatrix = Field(default_factory=ComparisonMatrix)
    eu_space_act_preview: EUSpaceActPreview
    recommendations: List[str] = Field(default_factory=list)


class RedactedSpaceLawResult(_Record):
    jurisdictions: List[RedactedJurisdictionResult] = Field(default_factory=list)
    comparison_matrix: ComparisonMatrix = Field(default_factory=ComparisonMatrix)
    eu_space_act_preview: EUSpaceActPreview
    recommendations: List[str] = Field(default_factory=list)


# Derived Results: Guideline Assessments


class GapAnalysisItem(_Record):
    guideline_id: str
    status: ComplianceStatus
    priority: GapPriority
    gap: str
    recommendation: str
    estimated_effort: Effort
    dependencies: List[str] = Field(default_factory=list)


class ComplianceScore(_Record):
    overall: int = Field(..., ge=0, le=100)
    by_source: Dict[GuidelineSource, int] = Field(default_factory=dict)
    by_category: Dict[GuidelineCategory, int] = Field(default_factory=dict)
    mandatory: int = Field(..., ge=0, le=100)
    recommended: int = Field(..., ge=0, le=100)


class ComplianceSummary(_Record):
    total_guidelines: int
    applicable: int
    compliant: int
    partial: int
    non_compliant: int
    not_assessed: int
    not_applicable: int
    critical_gaps: int
    major_gaps: int


class ArticleCrossReference(_Record):
    eu_space_act_article: str
    copuos_guidelines: List[Guideline] = Field(default_factory=list)
    iadc_guidelines: List[Guideline] = Field(default_factory=list)
    iso_requirements: List[Guideline] = Field(default_factory=list)


class GuidelineAssessmentResult(_Record):
    profile: MissionProfile
    applicable_guidelines: List[Guideline] = Field(default_factory=list)
    assessments: List[GuidelineAssessment] = Field(default_factory=list)
    score: ComplianceScore
    gap_analysis: List[GapAnalysisItem] = Field(default_factory=list)
    risk_level: RiskLevel
    eu_space_act_overlaps: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    summary: ComplianceSummary
