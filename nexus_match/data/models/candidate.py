"""
Candidate (professional) data model for Nexus Match.

Candidates are created and updated by profile-management collaborators;
the matching core only reads them.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nexus_match.utils.constants import (
    ExperienceLevel,
    Sector,
    TrainingFormat,
    TrainingLanguage,
)

from .base import coerce_enum


def _coerce_enum_set(enum_cls: type, value: Any) -> Any:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        value = [value]
    return frozenset(coerce_enum(enum_cls, item) for item in value)


class Candidate(BaseModel):
    """Read-only view of a professional profile used for scoring."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    professional_id: str = Field(..., min_length=1)

    # Display only, never scored
    name: str = ""
    title: str = ""

    sectors: frozenset[Sector] = Field(default_factory=frozenset)
    languages: frozenset[TrainingLanguage] = Field(default_factory=frozenset)
    formats: frozenset[TrainingFormat] = Field(default_factory=frozenset)
    experience_level: ExperienceLevel = ExperienceLevel.ENTRY
    rate_per_hour: Optional[float] = Field(default=None, gt=0)
    rating: Optional[float] = Field(default=None, ge=0, le=5)

    @field_validator("professional_id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        """Directory ids may arrive as ints or ObjectIds."""
        return v if isinstance(v, str) or v is None else str(v)

    @field_validator("sectors", mode="before")
    @classmethod
    def parse_sectors(cls, v: Any) -> Any:
        return _coerce_enum_set(Sector, v)

    @field_validator("languages", mode="before")
    @classmethod
    def parse_languages(cls, v: Any) -> Any:
        return _coerce_enum_set(TrainingLanguage, v)

    @field_validator("formats", mode="before")
    @classmethod
    def parse_formats(cls, v: Any) -> Any:
        return _coerce_enum_set(TrainingFormat, v)

    @field_validator("experience_level", mode="before")
    @classmethod
    def parse_experience_level(cls, v: Any) -> Any:
        return coerce_enum(ExperienceLevel, v)

    @property
    def effective_languages(self) -> frozenset[TrainingLanguage]:
        """Languages offered, with BILINGUAL expanded to English and Arabic."""
        if TrainingLanguage.BILINGUAL in self.languages:
            return self.languages | {TrainingLanguage.ENGLISH, TrainingLanguage.ARABIC}
        return self.languages

    @property
    def display_name(self) -> str:
        return self.name or self.professional_id
