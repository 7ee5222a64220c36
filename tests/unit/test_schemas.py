"""Tests for record models and tagged results."""

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from jobboard.core.results import Decision, ErrorKind, OperationResult
from jobboard.core.schemas import (
    Application,
    ApplicationStatus,
    Job,
    JobAlert,
    JobDraft,
    JobType,
    SavedJob,
    SubscriptionDetails,
    User,
    UserRole,
    new_id,
)


class TestNewId:
    def test_prefix(self) -> None:
        assert new_id("co_").startswith("co_")

    def test_unique(self) -> None:
        assert len({new_id() for _ in range(100)}) == 100


class TestUser:
    def test_candidate_defaults(self) -> None:
        u = User(name="A", email="a@x.com", role=UserRole.CANDIDATE)
        assert u.is_active is True
        assert u.provider == "email"
        assert u.skills == []
        assert u.preferences.is_open_to_work is False
        assert u.company_id is None

    def test_role_required(self) -> None:
        with pytest.raises(ValidationError):
            User(name="A", email="a@x.com")  # type: ignore[call-arg]

    def test_has_saved(self) -> None:
        u = User(
            name="A", email="a@x.com", role=UserRole.CANDIDATE,
            saved_jobs=[SavedJob(job_id="j1")],
        )
        assert u.has_saved("j1") is True
        assert u.has_saved("j2") is False

    def test_json_round_trip_keeps_nested(self) -> None:
        u = User(
            name="A", email="a@x.com", role=UserRole.CANDIDATE,
            saved_jobs=[SavedJob(job_id="j1", saved_at=datetime(2026, 1, 1))],
        )
        assert User.model_validate_json(u.model_dump_json()) == u

    def test_experience_dates_parsed(self) -> None:
        u = User.model_validate({
            "name": "A", "email": "a@x.com", "role": "CANDIDATE",
            "experience": [{"title": "T", "company": "C", "start_date": "2020-05-01"}],
        })
        assert u.experience[0].start_date == date(2020, 5, 1)


class TestJobAlert:
    def test_frequency_validated(self) -> None:
        with pytest.raises(ValidationError):
            JobAlert(query="RevOps", frequency="hourly")

    def test_defaults(self) -> None:
        alert = JobAlert(query="RevOps")
        assert alert.frequency == "weekly"
        assert alert.active is True


class TestSubscriptionDetails:
    def test_unlimited_credits_allowed(self) -> None:
        sub = SubscriptionDetails(plan_id="ENTERPRISE", start_date=datetime(2026, 1, 1), job_credits=-1)
        assert sub.job_credits == -1
        assert sub.talent_access_expires_at is None

    def test_negative_credits_below_unlimited_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SubscriptionDetails(plan_id="FREE", start_date=datetime(2026, 1, 1), job_credits=-2)

    def test_unknown_plan_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SubscriptionDetails(plan_id="GOLD", start_date=datetime(2026, 1, 1), job_credits=1)


class TestJob:
    def test_type_values(self) -> None:
        job = Job(title="T", company_id="c", company_name="C", location="L", author_id="u", type="Part-time")
        assert job.type == JobType.PART_TIME
        assert job.views == 0
        assert job.is_active is True

    def test_negative_counters_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Job(title="T", company_id="c", company_name="C", location="L", author_id="u", views=-1)


class TestJobDraft:
    def test_title_required(self) -> None:
        with pytest.raises(ValidationError):
            JobDraft(title="", location="Remote")

    def test_frozen(self) -> None:
        draft = JobDraft(title="T", location="Remote")
        with pytest.raises(ValidationError):
            draft.title = "Other"  # type: ignore[misc]


class TestApplication:
    def test_defaults(self) -> None:
        app = Application(job_id="j1", user_id="u1")
        assert app.status == ApplicationStatus.APPLIED
        assert app.rating is None

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_bounds(self, rating: int) -> None:
        with pytest.raises(ValidationError):
            Application(job_id="j1", user_id="u1", rating=rating)


class TestResults:
    def test_decision_allow(self) -> None:
        d = Decision.allow()
        assert d.allowed is True
        assert d.reason is None

    def test_decision_deny(self) -> None:
        d = Decision.deny("nope")
        assert d.allowed is False
        assert d.reason == "nope"

    def test_success(self) -> None:
        r = OperationResult.success(5)
        assert r.ok is True
        assert r.value == 5
        assert r.error is None

    def test_failure(self) -> None:
        r: OperationResult[int] = OperationResult.failure(ErrorKind.NOT_FOUND, "Job not found")
        assert r.ok is False
        assert r.value is None
        assert r.error == ErrorKind.NOT_FOUND
        assert r.reason == "Job not found"
