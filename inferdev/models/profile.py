"""Respondent profile facts collected at intake."""

from typing import Any, Dict, List, Optional

from pydantic import field_validator

from inferdev.models.base import DomainModel
from inferdev.utils.constants import (
    CodingExperience,
    CodingLevel,
    ConditionKeys,
    ItMajorDetail,
    Major,
)


class ProfileFacts(DomainModel):
    """Answers to the intake form; they decide which questions are shown.

    Every field is optional at construction so that an incomplete form can
    be represented and reported field by field via ``missing_fields``.
    """

    major: Optional[Major] = None
    it_major_detail: Optional[ItMajorDetail] = None
    coding_exp: Optional[CodingExperience] = None
    coding_level: Optional[CodingLevel] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_as_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def missing_fields(self) -> List[str]:
        """Condition keys of required fields that were left empty, in form order."""
        missing = []
        if self.major is None:
            missing.append(ConditionKeys.MAJOR)
        elif self.major == Major.IT and self.it_major_detail is None:
            missing.append(ConditionKeys.IT_MAJOR_DETAIL)

        if self.coding_exp is None:
            missing.append(ConditionKeys.CODING_EXP)
        elif self.coding_exp == CodingExperience.YES and self.coding_level is None:
            missing.append(ConditionKeys.CODING_LEVEL)
        return missing

    def as_condition_facts(self) -> Dict[str, str]:
        """Facts keyed the way question conditions reference them."""
        facts = {
            ConditionKeys.MAJOR: self.major,
            ConditionKeys.IT_MAJOR_DETAIL: self.it_major_detail,
            ConditionKeys.CODING_EXP: self.coding_exp,
            ConditionKeys.CODING_LEVEL: self.coding_level,
        }
        return {key: value.value for key, value in facts.items() if value is not None}
