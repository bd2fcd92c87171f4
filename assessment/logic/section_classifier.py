"""Route each section to exactly one analyzer by its declared type.

A missing or unrecognised type is a configuration defect in stored data and
raises `UnknownSectionTypeError`. Positional inference for untyped sections
exists only behind `ScoringConfig.legacy_positional_types`.
"""

from __future__ import annotations

import logging
from typing import Optional

from assessment.config import ScoringConfig
from assessment.logic.errors import UnknownSectionTypeError
from assessment.models.questionnaire import Section
from assessment.models.section_type import SectionType


logger = logging.getLogger(__name__)


def legacy_type_for_index(index: int, settings: ScoringConfig) -> str:
    if index < settings.legacy_weighted_sections:
        return SectionType.WEIGHTED
    if index < settings.legacy_weighted_sections + settings.legacy_matrix_sections:
        return SectionType.MATRIX
    return SectionType.COUNT


def classify_section(
    section: Section,
    index: Optional[int] = None,
    *,
    settings: Optional[ScoringConfig] = None,
) -> str:
    """Return one of `SectionType.ALL` for `section`.

    `index` is the section's position in its definition and is only consulted
    when the legacy positional fallback is enabled and no type is declared.
    """
    settings = settings or ScoringConfig()
    declared = (section.section_type or "").strip().lower()
    if declared in SectionType.ALL:
        return declared
    if declared:
        raise UnknownSectionTypeError(section.id, section.section_type)
    if settings.legacy_positional_types and index is not None:
        inferred = legacy_type_for_index(index, settings)
        logger.warning(
            "section_type_inferred_from_position section_id=%s index=%s type=%s",
            section.id,
            index,
            inferred,
        )
        return inferred
    raise UnknownSectionTypeError(section.id, None)


__all__ = ["classify_section", "legacy_type_for_index"]
