"""
Tests for nexus_match.utils.constants: enums, scoring weights, strength levels.
"""

import pytest

from nexus_match.utils.constants import (
    DEFAULT_SCORING_WEIGHTS,
    EXPERIENCE_ORDER,
    REASON_PRIORITY,
    SCORE_THRESHOLDS,
    SECTOR_KEYWORDS,
    AuditAction,
    ExperienceLevel,
    JobStatus,
    MatchStatus,
    MatchStrength,
    Sector,
    TrainingFormat,
    TrainingLanguage,
    Urgency,
    list_sectors,
    normalize_enum_token,
)


# ── MatchStrength.from_score() ──────────────────────────────────────────────


class TestMatchStrengthFromScore:
    def test_exceptional_at_threshold(self):
        assert MatchStrength.from_score(0.90) == MatchStrength.EXCEPTIONAL

    def test_exceptional_at_max(self):
        assert MatchStrength.from_score(1.0) == MatchStrength.EXCEPTIONAL

    def test_excellent_just_below_exceptional(self):
        assert MatchStrength.from_score(0.899) == MatchStrength.EXCELLENT

    def test_strong_at_threshold(self):
        assert MatchStrength.from_score(0.70) == MatchStrength.STRONG

    def test_good_at_threshold(self):
        assert MatchStrength.from_score(0.60) == MatchStrength.GOOD

    def test_moderate_at_threshold(self):
        assert MatchStrength.from_score(0.40) == MatchStrength.MODERATE

    def test_basic_below_moderate(self):
        assert MatchStrength.from_score(0.399) == MatchStrength.BASIC

    def test_basic_at_zero(self):
        assert MatchStrength.from_score(0.0) == MatchStrength.BASIC

    def test_label(self):
        assert MatchStrength.STRONG.label == "Strong Match"


# ── Token enums ─────────────────────────────────────────────────────────────


class TestNormalizeEnumToken:
    def test_mixed_case_and_hyphen(self):
        assert normalize_enum_token(" In-Person ") == "in_person"

    def test_spaces_become_underscores(self):
        assert normalize_enum_token("Oil Gas") == "oil_gas"

    def test_non_string_passthrough(self):
        assert normalize_enum_token(3) == 3


class TestTokenEnums:
    @pytest.mark.parametrize("raw", ["ONLINE", "Online", " online "])
    def test_format_case_insensitive(self, raw):
        assert TrainingFormat(raw) == TrainingFormat.ONLINE

    def test_format_hyphenated(self):
        assert TrainingFormat("In-Person") == TrainingFormat.IN_PERSON

    def test_sector_with_space(self):
        assert Sector("Real Estate") == Sector.REAL_ESTATE

    def test_language_upper(self):
        assert TrainingLanguage("ARABIC") == TrainingLanguage.ARABIC

    def test_experience_aliases(self):
        assert ExperienceLevel("mid") == ExperienceLevel.INTERMEDIATE
        assert ExperienceLevel("Executive") == ExperienceLevel.EXPERT

    def test_unknown_value_raises(self):
        with pytest.raises(ValueError):
            Sector("astrology")

    def test_display_name_default(self):
        assert TrainingFormat.IN_PERSON.display_name == "In Person"
        assert Sector.TECHNOLOGY.display_name == "Technology"

    def test_display_name_override(self):
        assert Sector.OIL_GAS.display_name == "Oil & Gas"

    def test_experience_ordinals_ascend(self):
        ordinals = [level.ordinal for level in EXPERIENCE_ORDER]
        assert ordinals == sorted(ordinals)
        assert ExperienceLevel.ENTRY.ordinal == 0
        assert ExperienceLevel.EXPERT.ordinal == 4

    def test_urgency_ordinals(self):
        assert Urgency.LOW.ordinal < Urgency.MEDIUM.ordinal < Urgency.HIGH.ordinal


# ── Enum value correctness ──────────────────────────────────────────────────


class TestJobStatus:
    def test_all_values_present(self):
        expected = {"draft", "open", "paused", "closed", "filled", "expired", "deleted"}
        assert {s.value for s in JobStatus} == expected


class TestMatchStatus:
    def test_all_values_present(self):
        expected = {"ok", "incomplete", "timed_out", "job_not_live", "cancelled"}
        assert {s.value for s in MatchStatus} == expected


class TestAuditAction:
    def test_all_values_present(self):
        expected = {
            "job_created", "job_status_changed", "job_deleted",
            "job_duplicated", "match_feedback",
        }
        assert {a.value for a in AuditAction} == expected


# ── DEFAULT_SCORING_WEIGHTS ─────────────────────────────────────────────────


class TestDefaultScoringWeights:
    def test_weights_sum_to_one(self):
        assert abs(sum(DEFAULT_SCORING_WEIGHTS.values()) - 1.0) < 1e-9

    def test_expected_keys(self):
        expected = {"sector", "language", "format", "experience", "budget", "rating"}
        assert set(DEFAULT_SCORING_WEIGHTS) == expected

    def test_sector_is_largest(self):
        assert DEFAULT_SCORING_WEIGHTS["sector"] == max(DEFAULT_SCORING_WEIGHTS.values())

    def test_reason_priority_covers_every_feature(self):
        assert set(REASON_PRIORITY) == set(DEFAULT_SCORING_WEIGHTS)


# ── SCORE_THRESHOLDS / SECTOR_KEYWORDS ──────────────────────────────────────


class TestScoreThresholds:
    def test_thresholds_are_descending(self):
        values = [
            SCORE_THRESHOLDS[name]
            for name in ("exceptional", "excellent", "strong", "good", "moderate")
        ]
        assert values == sorted(values, reverse=True)


class TestSectorKeywords:
    def test_every_sector_has_keywords(self):
        for sector in Sector:
            assert SECTOR_KEYWORDS[sector]["keywords"], f"{sector.value} has no keywords"

    def test_list_sectors(self):
        catalog = list_sectors()
        assert [s["value"] for s in catalog] == [s.value for s in Sector]
        oil_gas = next(s for s in catalog if s["value"] == "oil_gas")
        assert oil_gas["name"] == "Oil & Gas"
        assert "petroleum" in oil_gas["keywords"]
        assert oil_gas["arabic_keywords"]
