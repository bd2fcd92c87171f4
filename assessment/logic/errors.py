"""Domain errors raised by the scoring engine and its storage collaborators.

Each error carries a stable `code` used by the problem+json helpers in
`assessment.logic.problem_factory`.
"""

from __future__ import annotations

from typing import List, Optional


class AssessmentError(Exception):
    code = "ASSESSMENT_ERROR"


class MissingDefinitionError(AssessmentError):
    """The questionnaire version referenced by a response cannot be located."""

    code = "REPORT_DEFINITION_MISSING"

    def __init__(self, questionnaire_version_id: str, detail: Optional[str] = None) -> None:
        self.questionnaire_version_id = questionnaire_version_id
        super().__init__(
            detail or f"questionnaire version {questionnaire_version_id!r} not found; cannot build report"
        )


class UnknownSectionTypeError(AssessmentError):
    code = "UNKNOWN_SECTION_TYPE"

    def __init__(self, section_id: str, section_type: Optional[str]) -> None:
        self.section_id = section_id
        self.section_type = section_type
        if section_type:
            message = f"section {section_id!r} has unknown type {section_type!r}"
        else:
            message = f"section {section_id!r} has no type"
        super().__init__(message)


class DefinitionValidationError(AssessmentError):
    code = "QUESTIONNAIRE_DEFINITION_INVALID"

    def __init__(self, errors: List[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid questionnaire definition")


class DefinitionConflictError(AssessmentError):
    code = "QUESTIONNAIRE_VERSION_EXISTS"

    def __init__(self, questionnaire_version_id: str) -> None:
        self.questionnaire_version_id = questionnaire_version_id
        super().__init__(f"questionnaire version {questionnaire_version_id!r} already exists")


class QuestionnaireNotFoundError(AssessmentError):
    code = "QUESTIONNAIRE_NOT_FOUND"

    def __init__(self, questionnaire_version_id: str) -> None:
        self.questionnaire_version_id = questionnaire_version_id
        super().__init__(f"questionnaire version {questionnaire_version_id!r} not found")


class ResponseNotFoundError(AssessmentError):
    code = "RESPONSE_NOT_FOUND"

    def __init__(self, response_id: str) -> None:
        self.response_id = response_id
        super().__init__(f"response {response_id!r} not found")


class SectionNotFoundError(AssessmentError):
    code = "SECTION_NOT_FOUND"

    def __init__(self, section_id: str) -> None:
        self.section_id = section_id
        super().__init__(f"section {section_id!r} not found in questionnaire version")


class InvalidAnswerError(AssessmentError):
    code = "RESPONSE_ANSWER_INVALID"

    def __init__(self, errors: List[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


__all__ = [
    "AssessmentError",
    "MissingDefinitionError",
    "UnknownSectionTypeError",
    "DefinitionValidationError",
    "DefinitionConflictError",
    "QuestionnaireNotFoundError",
    "ResponseNotFoundError",
    "SectionNotFoundError",
    "InvalidAnswerError",
]
