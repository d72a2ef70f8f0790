# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_spacelaw

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from coreason_spacelaw.config import settings
from coreason_spacelaw.exceptions import ReferenceDataError
from coreason_spacelaw.schema import (
    Guideline,
    GuidelineCategory,
    GuidelineSource,
    JurisdictionLaw,
    ReferenceBundle,
    SpaceLawCrossReference,
)
from coreason_spacelaw.utils.logger import logger

DEFAULT_DATA_DIR = Path(__file__).parent / "data"


def _record_kind(item: Dict[str, Any]) -> str:
    """Identify a bare record by its identifying key."""
    if "country_code" in item:
        return "jurisdiction"
    if "reference_number" in item:
        return "guideline"
    if "national_law_area" in item:
        return "cross_reference"
    raise ValueError(f"Unrecognised reference record (keys: {sorted(item)})")


def _parse_content(content: Any) -> ReferenceBundle:
    """
    Normalise the three accepted file shapes into a bundle:
    a full bundle object, a list of records, or a single record.
    """
    is_bundle = isinstance(content, dict) and any(
        key in content for key in ("jurisdictions", "guidelines", "cross_references")
    )
    if is_bundle:
        return ReferenceBundle(**content)

    items = content if isinstance(content, list) else [content]
    grouped: Dict[str, List[Any]] = {"jurisdiction": [], "guideline": [], "cross_reference": []}
    for item in items:
        if not isinstance(item, dict):
            raise ValueError(f"Expected an object, got {type(item).__name__}")
        grouped[_record_kind(item)].append(item)

    return ReferenceBundle(
        jurisdictions=grouped["jurisdiction"],
        guidelines=grouped["guideline"],
        cross_references=grouped["cross_reference"],
    )


class ReferenceArchive:
    """
    Read-only store of jurisdiction laws, international guidelines and
    EU Space Act cross-references.

    Content is validated into frozen models when loaded and is never
    mutated afterwards; every query returns a fresh container.
    """

    def __init__(self) -> None:
        self._jurisdictions: Dict[str, JurisdictionLaw] = {}
        self._guidelines: Dict[str, Guideline] = {}
        self._cross_references: Tuple[SpaceLawCrossReference, ...] = ()
        self._version: str = "0.0.0"

    def load_from_directory(self, directory_path: str | Path) -> None:
        """
        Loads reference content from all JSON files in the specified directory recursively.
        Raises ReferenceDataError if a file is malformed or duplicate identifiers are detected.
        """
        path = Path(directory_path)
        if not path.exists():
            logger.error(f"Directory not found: {path}")
            raise FileNotFoundError(f"Directory not found: {path}")

        jurisdictions: Dict[str, JurisdictionLaw] = {}
        guidelines: Dict[str, Guideline] = {}
        cross_references: Dict[str, SpaceLawCrossReference] = {}
        version = self._version

        # Sorted for a deterministic load order
        for file_path in sorted(path.rglob("*.json")):
            try:
                content = json.loads(file_path.read_text(encoding="utf-8"))
                bundle = _parse_content(content)
            except (ValueError, ValidationError) as e:
                logger.error(f"Failed to load {file_path}: {e}")
                raise ReferenceDataError(f"Failed to parse {file_path}: {e}") from e

            self._merge(jurisdictions, ((j.country_code, j) for j in bundle.jurisdictions), "Jurisdiction", file_path)
            self._merge(guidelines, ((g.id, g) for g in bundle.guidelines), "Guideline", file_path)
            self._merge(cross_references, ((x.id, x) for x in bundle.cross_references), "Cross-reference", file_path)

            if bundle.version:
                version = bundle.version
            logger.debug(f"Loaded content from {file_path}")

        self._jurisdictions = jurisdictions
        self._guidelines = guidelines
        self._cross_references = tuple(cross_references.values())
        self._version = version
        logger.info(
            f"ReferenceArchive loaded {len(self._jurisdictions)} jurisdictions, "
            f"{len(self._guidelines)} guidelines and {len(self._cross_references)} cross-references."
        )

    @staticmethod
    def _merge(target: Dict[str, Any], records: Iterable[Tuple[str, Any]], label: str, file_path: Path) -> None:
        for key, record in records:
            if key in target:
                msg = f"Duplicate {label} ID detected: {key} in {file_path}"
                logger.error(msg)
                raise ReferenceDataError(msg)
            target[key] = record

    def load_defaults(self, data_dir: Optional[Path] = None) -> None:
        """
        Load the default reference content.

        :param data_dir: Directory to load from. Falls back to the configured data_dir,
            then to the content packaged with the library.
        """
        data_dir = data_dir or settings.data_dir or DEFAULT_DATA_DIR
        if not data_dir.exists():
            logger.warning(f"Default reference data directory not found: {data_dir}")
            return
        self.load_from_directory(data_dir)

    def get_jurisdiction(self, code: str) -> Optional[JurisdictionLaw]:
        return self._jurisdictions.get(code)

    def get_jurisdictions(self) -> List[JurisdictionLaw]:
        return list(self._jurisdictions.values())

    @property
    def jurisdiction_codes(self) -> List[str]:
        return list(self._jurisdictions)

    def get_guideline(self, guideline_id: str) -> Optional[Guideline]:
        return self._guidelines.get(guideline_id)

    def get_guidelines(
        self,
        sources: Optional[List[GuidelineSource]] = None,
        categories: Optional[List[GuidelineCategory]] = None,
    ) -> List[Guideline]:
        """
        Retrieve guidelines, optionally filtered by source and category.

        :param sources: Guideline sources to include. If None, all sources are included.
        :param categories: Guideline categories to include. If None, all categories are included.
        :return: Guidelines in load order.
        """
        filtered = list(self._guidelines.values())
        if sources:
            filtered = [g for g in filtered if g.source in sources]
        if categories:
            filtered = [g for g in filtered if g.category in categories]
        return filtered

    def get_cross_references(self, country_code: Optional[str] = None) -> List[SpaceLawCrossReference]:
        if country_code is None:
            return list(self._cross_references)
        return [x for x in self._cross_references if country_code in x.applicable_countries]

    @property
    def version(self) -> str:
        return self._version


@lru_cache(maxsize=1)
def get_default_archive() -> ReferenceArchive:
    """Process-wide archive, loaded on first use and shared read-only afterwards."""
    archive = ReferenceArchive()
    archive.load_defaults()
    return archive
