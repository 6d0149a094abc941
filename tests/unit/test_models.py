"""
Tests for Pydantic data models in nexus_match.data.models.
"""

from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId

from nexus_match.core.exceptions import ValidationError
from nexus_match.data.models import (
    JOB_CONTENT_FIELDS,
    Candidate,
    JobCreate,
    JobPosting,
    MatchResponse,
    MatchResult,
    Requirement,
    ScoringWeights,
    parse_requirement,
    utc_now,
)
from nexus_match.data.models.base import PyObjectId, ensure_utc
from nexus_match.utils.constants import (
    ExperienceLevel,
    JobStatus,
    MatchStatus,
    Sector,
    TrainingFormat,
    TrainingLanguage,
    Urgency,
)


# ═══════════════════════════════════════════════════════════════════════════
#  base.py
# ═══════════════════════════════════════════════════════════════════════════


class TestPyObjectId:
    def test_validate_valid_string(self):
        oid = ObjectId()
        assert PyObjectId.validate(str(oid)) == oid

    def test_validate_object_id_passthrough(self):
        oid = ObjectId()
        assert PyObjectId.validate(oid) is oid

    def test_validate_invalid_raises(self):
        with pytest.raises(ValueError):
            PyObjectId.validate("not-an-id")


class TestEnsureUtc:
    def test_naive_becomes_utc(self):
        value = ensure_utc(datetime(2026, 1, 1, 12, 0))
        assert value.tzinfo == timezone.utc

    def test_aware_unchanged(self):
        aware = datetime(2026, 1, 1, tzinfo=timezone(timedelta(hours=4)))
        assert ensure_utc(aware) is aware

    def test_none_passthrough(self):
        assert ensure_utc(None) is None


# ═══════════════════════════════════════════════════════════════════════════
#  requirement.py
# ═══════════════════════════════════════════════════════════════════════════


class TestRequirementParsing:
    def test_camel_case_keys(self):
        req = Requirement.model_validate(
            {"sector": "Finance", "trainingType": "Compliance", "budgetPerHour": 90}
        )
        assert req.sector == Sector.FINANCE
        assert req.training_type == "Compliance"
        assert req.budget_per_hour == 90

    def test_snake_case_keys(self, make_requirement):
        req = make_requirement(preferred_language="ENGLISH", format="In-Person")
        assert req.preferred_language == TrainingLanguage.ENGLISH
        assert req.format == TrainingFormat.IN_PERSON

    def test_experience_alias(self, make_requirement):
        assert make_requirement(experience_level="mid").experience_level == ExperienceLevel.INTERMEDIATE

    def test_urgency_parsed(self, make_requirement):
        assert make_requirement(urgency="HIGH").urgency == Urgency.HIGH

    def test_blank_values_are_unset(self):
        req = Requirement(sector="", training_type="   ")
        assert req.sector is None
        assert req.training_type is None

    def test_is_frozen(self, make_requirement):
        req = make_requirement()
        with pytest.raises(Exception):
            req.sector = Sector.RETAIL


class TestParseRequirement:
    def test_passthrough_model(self, make_requirement):
        req = make_requirement()
        assert parse_requirement(req) is req

    def test_unknown_sector_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_requirement({"sector": "astrology", "trainingType": "x"})
        assert any(e["field"] == "sector" for e in exc_info.value.errors)

    def test_non_positive_team_size_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_requirement({"sector": "technology", "trainingType": "x", "teamSize": 0})
        assert any("team" in e["field"].lower() for e in exc_info.value.errors)

    def test_non_positive_budget_rejected(self):
        with pytest.raises(ValidationError):
            parse_requirement({"sector": "technology", "trainingType": "x", "budgetPerHour": -5})

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_requirement({"format": "carrier pigeon"})


class TestRequirementCompleteness:
    def test_complete(self, make_requirement):
        req = make_requirement()
        assert req.is_complete
        assert req.missing_required_fields == []
        req.require_complete()

    def test_missing_sector(self):
        req = Requirement(training_type="Leadership")
        assert not req.is_complete
        assert req.missing_required_fields == ["sector"]

    def test_missing_both(self):
        req = Requirement()
        assert req.missing_required_fields == ["sector", "training_type"]

    def test_require_complete_lists_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            Requirement(sector="technology").require_complete()
        assert [e["field"] for e in exc_info.value.errors] == ["training_type"]


class TestRequirementFingerprint:
    def test_stable(self, make_requirement):
        assert make_requirement().fingerprint() == make_requirement().fingerprint()

    def test_sixteen_hex_chars(self, make_requirement):
        fp = make_requirement().fingerprint()
        assert len(fp) == 16
        int(fp, 16)

    def test_training_type_normalized(self, make_requirement):
        a = make_requirement(training_type="Leadership  Skills")
        b = make_requirement(training_type="leadership skills")
        assert a.fingerprint() == b.fingerprint()

    def test_budget_and_team_size_excluded(self, make_requirement):
        a = make_requirement(budget_per_hour=100, team_size=5, urgency="low")
        b = make_requirement(budget_per_hour=300, team_size=50, urgency="high")
        assert a.fingerprint() == b.fingerprint()

    @pytest.mark.parametrize(
        "field, value",
        [
            ("sector", "finance"),
            ("training_type", "Negotiation"),
            ("preferred_language", "arabic"),
            ("format", "hybrid"),
            ("experience_level", "expert"),
        ],
    )
    def test_gating_fields_change_fingerprint(self, make_requirement, field, value):
        assert make_requirement(**{field: value}).fingerprint() != make_requirement().fingerprint()


# ═══════════════════════════════════════════════════════════════════════════
#  candidate.py
# ═══════════════════════════════════════════════════════════════════════════


class TestCandidate:
    def test_enum_sets_parsed(self, make_candidate):
        c = make_candidate(sectors=["Technology", "Oil-Gas"], formats="ONLINE")
        assert c.sectors == frozenset({Sector.TECHNOLOGY, Sector.OIL_GAS})
        assert c.formats == frozenset({TrainingFormat.ONLINE})

    def test_none_becomes_empty_set(self):
        c = Candidate(professional_id="x", languages=None)
        assert c.languages == frozenset()

    def test_numeric_id_stringified(self):
        assert Candidate(professional_id=42).professional_id == "42"

    def test_empty_id_rejected(self):
        with pytest.raises(Exception):
            Candidate(professional_id="")

    def test_rating_out_of_range_rejected(self, make_candidate):
        with pytest.raises(Exception):
            make_candidate(rating=5.5)

    def test_non_positive_rate_rejected(self, make_candidate):
        with pytest.raises(Exception):
            make_candidate(rate_per_hour=0)

    def test_default_experience_is_entry(self):
        assert Candidate(professional_id="x").experience_level == ExperienceLevel.ENTRY

    def test_bilingual_expands(self, make_candidate):
        c = make_candidate(languages=["bilingual"])
        assert {TrainingLanguage.ENGLISH, TrainingLanguage.ARABIC} <= c.effective_languages

    def test_effective_languages_plain(self, make_candidate):
        c = make_candidate(languages=["arabic"])
        assert c.effective_languages == frozenset({TrainingLanguage.ARABIC})

    def test_display_name_falls_back_to_id(self):
        assert Candidate(professional_id="p-9").display_name == "p-9"


# ═══════════════════════════════════════════════════════════════════════════
#  match.py
# ═══════════════════════════════════════════════════════════════════════════


class TestScoringWeights:
    def test_defaults_total_one(self):
        assert ScoringWeights.from_defaults().total_weight == pytest.approx(1.0)

    def test_to_dict_keys(self):
        assert set(ScoringWeights().to_dict()) == {
            "sector", "language", "format", "experience", "budget", "rating",
        }

    def test_negative_weight_rejected(self):
        with pytest.raises(Exception):
            ScoringWeights(sector=-0.1)


class TestMatchResponse:
    def _result(self, score=0.8):
        return MatchResult(professional_id="A", score=score, rank=1)

    def test_same_output_ignores_revision_and_snapshot(self):
        a = MatchResponse(status=MatchStatus.OK, results=(self._result(),), snapshot_version=1, revision=1)
        b = MatchResponse(status=MatchStatus.OK, results=(self._result(),), snapshot_version=2, revision=4)
        assert a.same_output(b)

    def test_different_scores_differ(self):
        a = MatchResponse(status=MatchStatus.OK, results=(self._result(0.8),))
        b = MatchResponse(status=MatchStatus.OK, results=(self._result(0.7),))
        assert not a.same_output(b)

    def test_none_differs(self):
        assert not MatchResponse(status=MatchStatus.OK).same_output(None)

    def test_is_ok(self):
        assert MatchResponse(status=MatchStatus.OK).is_ok
        assert not MatchResponse(status=MatchStatus.TIMED_OUT).is_ok


# ═══════════════════════════════════════════════════════════════════════════
#  job.py
# ═══════════════════════════════════════════════════════════════════════════


class TestJobCreate:
    def test_valid(self, make_job_content):
        content = make_job_content()
        assert content.title == "Leadership Workshop Facilitator"

    def test_empty_title_rejected(self, make_job_content):
        with pytest.raises(Exception):
            make_job_content(title="")

    def test_compensation_range_validated(self, make_job_content):
        with pytest.raises(Exception):
            make_job_content(min_compensation=200, max_compensation=100)

    def test_naive_expiry_made_utc(self, make_job_content):
        content = make_job_content(expires_at=datetime(2030, 1, 1))
        assert content.expires_at.tzinfo == timezone.utc

    def test_content_fields_exclude_lifecycle(self):
        assert "featured" not in JOB_CONTENT_FIELDS
        assert "expires_at" not in JOB_CONTENT_FIELDS
        assert "title" in JOB_CONTENT_FIELDS
        assert "training_requirement" in JOB_CONTENT_FIELDS


class TestJobPostingExpiry:
    def _job(self, status, expires_at):
        return JobPosting(company_id="c1", title="Role", status=status, expires_at=expires_at)

    def test_open_past_expiry_is_expired(self, past):
        job = self._job("open", past)
        assert job.effective_status() == JobStatus.EXPIRED
        assert not job.is_live()

    def test_paused_past_expiry_is_expired(self, past):
        assert self._job("paused", past).effective_status() == JobStatus.EXPIRED

    def test_closed_past_expiry_stays_closed(self, past):
        assert self._job("closed", past).effective_status() == JobStatus.CLOSED

    def test_future_expiry_is_live(self):
        job = self._job("open", utc_now() + timedelta(days=1))
        assert job.effective_status() == JobStatus.OPEN
        assert job.is_live()

    def test_no_expiry_never_expires(self):
        assert not self._job("open", None).is_expired()

    def test_expiry_at_now_boundary(self):
        now = utc_now()
        assert self._job("open", now).is_expired(now)

    def test_stored_status_unchanged(self, past):
        job = self._job("open", past)
        job.effective_status()
        assert job.status == JobStatus.OPEN.value


class TestJobPostingSerialization:
    def test_mongo_dump_omits_missing_id(self):
        data = JobPosting(company_id="c1", title="Role").model_dump_mongo()
        assert "_id" not in data
        assert data["status"] == "draft"

    def test_mongo_dump_embeds_requirement_by_alias(self, make_requirement):
        job = JobPosting(
            company_id="c1",
            title="Role",
            training_requirement=make_requirement(budget_per_hour=120),
        )
        embedded = job.model_dump_mongo()["training_requirement"]
        assert embedded["trainingType"] == "Leadership"
        assert embedded["sector"] == "technology"
        assert embedded["budgetPerHour"] == 120

    def test_round_trip_from_document(self, make_requirement):
        oid = ObjectId()
        job = JobPosting(company_id="c1", title="Role", training_requirement=make_requirement())
        restored = JobPosting.model_validate({**job.model_dump_mongo(), "_id": oid})
        assert restored.id == oid
        assert restored.job_id == str(oid)
        assert restored.training_requirement == job.training_requirement

    def test_content_is_copyable(self, make_job_content):
        job = JobPosting(company_id="c1", **make_job_content().model_dump())
        content = job.content()
        assert set(content) == set(JOB_CONTENT_FIELDS)
        assert "featured" not in content
