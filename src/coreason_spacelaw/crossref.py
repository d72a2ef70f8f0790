# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_spacelaw

from typing import Dict, Iterable, List, Mapping, Sequence

from coreason_spacelaw.schema import (
    ArticleCrossReference,
    CrossReferenceRelationship,
    EUSpaceActPreview,
    Guideline,
    GuidelineCategory,
    GuidelineSource,
    JurisdictionLaw,
    JurisdictionNote,
    SpaceLawCrossReference,
)

GAP_MESSAGE = (
    "The EU Space Act will fill significant regulatory gaps in some of your selected jurisdictions "
    "and harmonize requirements across all EU member states by 2030."
)
PARALLEL_MESSAGE = (
    "Your selected jurisdictions maintain independent regimes from the EU Space Act. "
    "Separate compliance may be required for EU market access."
)
HARMONIZATION_MESSAGE = (
    "The EU Space Act (effective 2030) will harmonize authorization requirements across EU member states. "
    "National provisions will be gradually superseded or complemented by the unified EU framework."
)

DEBRIS_MODULE_ARTICLES = ("Art. 63", "Art. 64", "Art. 65", "Art. 66", "Art. 67", "Art. 72", "Art. 73")
DEBRIS_CATEGORIES = frozenset(
    {GuidelineCategory.SPACE_DEBRIS, GuidelineCategory.DISPOSAL, GuidelineCategory.DESIGN_PASSIVATION}
)


def format_key_change(ref: SpaceLawCrossReference) -> str:
    articles = f" ({', '.join(ref.eu_space_act_articles)})" if ref.eu_space_act_articles else ""
    return f"{ref.national_law_area}{articles}: {ref.relationship.value}"


def overall_relationship(relationships: Sequence[CrossReferenceRelationship]) -> str:
    """Any gap dominates; an all-parallel selection stays independent; anything else harmonizes."""
    if CrossReferenceRelationship.GAP in relationships:
        return GAP_MESSAGE
    if relationships and all(r == CrossReferenceRelationship.PARALLEL for r in relationships):
        return PARALLEL_MESSAGE
    return HARMONIZATION_MESSAGE


def build_eu_space_act_preview(
    selected_codes: Iterable[str],
    laws: Mapping[str, JurisdictionLaw],
    cross_references: Sequence[SpaceLawCrossReference],
    limit: int = 4,
) -> EUSpaceActPreview:
    notes: Dict[str, JurisdictionNote] = {}
    relationships: List[CrossReferenceRelationship] = []

    for code in selected_codes:
        law = laws.get(code)
        if law is None or code in notes:
            continue

        relevant = [ref for ref in cross_references if code in ref.applicable_countries]
        notes[code] = JurisdictionNote(
            relationship=law.eu_space_act_cross_ref.relationship,
            description=law.eu_space_act_cross_ref.description,
            key_changes=[format_key_change(ref) for ref in relevant[:limit]],
        )
        relationships.append(law.eu_space_act_cross_ref.relationship)

    return EUSpaceActPreview(overall_relationship=overall_relationship(relationships), jurisdiction_notes=notes)


# Guideline Cross-References


def find_eu_space_act_overlaps(guidelines: Iterable[Guideline]) -> List[str]:
    return sorted({ref for g in guidelines for ref in g.eu_space_act_cross_ref})


def cites_article(ref: str, article: str) -> bool:
    # "Art. 67" covers "Art. 67(a)"; "Art. 6" does not cover "Art. 63".
    return ref == article or ref.startswith(f"{article}(")


def cross_reference_for_article(guidelines: Iterable[Guideline], article: str) -> ArticleCrossReference:
    """Guidelines whose EU Space Act references cite the article, grouped by source."""
    matching = [g for g in guidelines if any(cites_article(ref, article) for ref in g.eu_space_act_cross_ref)]
    return ArticleCrossReference(
        eu_space_act_article=article,
        copuos_guidelines=[g for g in matching if g.source == GuidelineSource.COPUOS],
        iadc_guidelines=[g for g in matching if g.source == GuidelineSource.IADC],
        iso_requirements=[g for g in matching if g.source == GuidelineSource.ISO],
    )


def debris_related_guidelines(guidelines: Iterable[Guideline]) -> List[Guideline]:
    return [g for g in guidelines if g.category in DEBRIS_CATEGORIES]


def map_debris_module(guidelines: Sequence[Guideline]) -> Dict[str, List[Guideline]]:
    mapping: Dict[str, List[Guideline]] = {}
    for article in DEBRIS_MODULE_ARTICLES:
        ref = cross_reference_for_article(guidelines, article)
        mapping[article] = ref.copuos_guidelines + ref.iadc_guidelines + ref.iso_requirements
    return mapping
