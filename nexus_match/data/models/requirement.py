"""
Training requirement model for Nexus Match.

A requirement is a company's stated training need. It is ephemeral: it lives
for the duration of a match session and is only ever persisted embedded in a
job posting for reverse matching.
"""

import hashlib
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator
from pydantic.alias_generators import to_camel

from nexus_match.core.exceptions import ValidationError
from nexus_match.utils.constants import (
    ExperienceLevel,
    Sector,
    TrainingFormat,
    TrainingLanguage,
    Urgency,
)

from .base import coerce_enum


class Requirement(BaseModel):
    """
    Company training requirement submitted for matching.

    Every field is optional so half-edited forms can be held by a session;
    sector and training_type must be present before any scoring runs.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        str_strip_whitespace=True,
    )

    sector: Optional[Sector] = None
    training_type: Optional[str] = None
    preferred_language: Optional[TrainingLanguage] = None
    format: Optional[TrainingFormat] = None
    experience_level: Optional[ExperienceLevel] = None
    urgency: Optional[Urgency] = None
    team_size: Optional[int] = Field(default=None, gt=0)
    budget_per_hour: Optional[float] = Field(default=None, gt=0)

    @field_validator("sector", mode="before")
    @classmethod
    def parse_sector(cls, v: Any) -> Any:
        return coerce_enum(Sector, v)

    @field_validator("preferred_language", mode="before")
    @classmethod
    def parse_language(cls, v: Any) -> Any:
        return coerce_enum(TrainingLanguage, v)

    @field_validator("format", mode="before")
    @classmethod
    def parse_format(cls, v: Any) -> Any:
        return coerce_enum(TrainingFormat, v)

    @field_validator("experience_level", mode="before")
    @classmethod
    def parse_experience_level(cls, v: Any) -> Any:
        return coerce_enum(ExperienceLevel, v)

    @field_validator("urgency", mode="before")
    @classmethod
    def parse_urgency(cls, v: Any) -> Any:
        return coerce_enum(Urgency, v)

    @field_validator("training_type")
    @classmethod
    def blank_training_type_is_unset(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @property
    def is_complete(self) -> bool:
        """Whether the fields required for scoring are present."""
        return self.sector is not None and bool(self.training_type)

    @property
    def missing_required_fields(self) -> list[str]:
        missing = []
        if self.sector is None:
            missing.append("sector")
        if not self.training_type:
            missing.append("training_type")
        return missing

    def fingerprint(self) -> str:
        """
        Stable hash of the fields that gate recomputation.

        Budget, team size and urgency are excluded; a session picks up their
        edits on its next poll instead of starting a new pass.
        """
        training_type = " ".join((self.training_type or "").lower().split())
        parts = [
            self.sector.value if self.sector else "",
            training_type,
            self.preferred_language.value if self.preferred_language else "",
            self.format.value if self.format else "",
            self.experience_level.value if self.experience_level else "",
        ]
        return hashlib.sha256("|".join(parts).encode("utf-8")).hexdigest()[:16]

    def require_complete(self) -> None:
        """Raise ValidationError if sector or training_type is absent."""
        missing = self.missing_required_fields
        if missing:
            raise ValidationError(
                f"Requirement is missing required fields: {', '.join(missing)}",
                [{"field": name, "message": "Field required for matching"} for name in missing],
            )


def parse_requirement(data: dict[str, Any] | Requirement) -> Requirement:
    """
    Validate caller-supplied requirement data.

    Args:
        data: Raw requirement fields (snake_case or camelCase keys)

    Returns:
        Validated Requirement

    Raises:
        ValidationError: With field-level detail for every rejected field
    """
    if isinstance(data, Requirement):
        return data
    try:
        return Requirement.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e
