"""Tests for the admin console operations."""

from datetime import datetime

import pytest

from jobboard.core.db import RecordKind, RecordStore
from jobboard.core.results import ErrorKind
from jobboard.core.schemas import PlanTier, User, UserRole
from jobboard.services import admin as admin_service
from jobboard.services.admin import ADMINS_ONLY


class TestAccess:
    def test_non_admin_refused(self, seeded: RecordStore, owner: User) -> None:
        result = admin_service.list_users(seeded, owner)
        assert result.error == ErrorKind.ROLE_VIOLATION
        assert result.reason == ADMINS_ONLY

    def test_anonymous_refused(self, seeded: RecordStore) -> None:
        assert admin_service.list_companies(seeded, None).error == ErrorKind.UNAUTHENTICATED


class TestUsers:
    def test_list(self, seeded: RecordStore, admin: User) -> None:
        ids = [u.id for u in admin_service.list_users(seeded, admin).value]
        assert ids == ["1", "2", "2b", "3", "4"]

    def test_create(self, seeded: RecordStore, admin: User) -> None:
        new = User(name="Robin", email="robin@example.com", role=UserRole.CANDIDATE)
        assert admin_service.create_user(seeded, admin, new).ok is True
        assert seeded.get_by_id(RecordKind.USERS, new.id).email == "robin@example.com"

    def test_create_duplicate_email(self, seeded: RecordStore, admin: User) -> None:
        dup = User(name="Alex 2", email="alex@example.com", role=UserRole.CANDIDATE)
        assert admin_service.create_user(seeded, admin, dup).error == ErrorKind.EMAIL_TAKEN

    def test_update_role(self, seeded: RecordStore, admin: User) -> None:
        result = admin_service.update_user(seeded, admin, "4", {"role": UserRole.EMPLOYER, "company_id": "c2"})
        assert result.value.role == UserRole.EMPLOYER

    def test_update_to_taken_email(self, seeded: RecordStore, admin: User) -> None:
        result = admin_service.update_user(seeded, admin, "4", {"email": "alex@example.com"})
        assert result.error == ErrorKind.EMAIL_TAKEN
        assert seeded.get_by_id(RecordKind.USERS, "4").email == "jordan@example.com"
        assert len(seeded.list_by(RecordKind.USERS, "email", "alex@example.com")) == 1

    def test_update_keeps_own_email(self, seeded: RecordStore, admin: User) -> None:
        result = admin_service.update_user(seeded, admin, "4", {"email": "jordan@example.com", "name": "J"})
        assert result.ok is True
        assert result.value.name == "J"

    def test_update_to_free_email(self, seeded: RecordStore, admin: User) -> None:
        result = admin_service.update_user(seeded, admin, "4", {"email": "jordan@new.example.com"})
        assert result.value.email == "jordan@new.example.com"

    def test_update_id_refused(self, seeded: RecordStore, admin: User) -> None:
        with pytest.raises(ValueError):
            admin_service.update_user(seeded, admin, "4", {"id": "5"})

    def test_update_missing(self, seeded: RecordStore, admin: User) -> None:
        assert admin_service.update_user(seeded, admin, "ghost", {"name": "x"}).error == ErrorKind.NOT_FOUND

    def test_toggle_active(self, seeded: RecordStore, admin: User) -> None:
        assert admin_service.toggle_user_active(seeded, admin, "4").value.is_active is False
        assert admin_service.toggle_user_active(seeded, admin, "4").value.is_active is True

    def test_delete_keeps_applications(self, seeded: RecordStore, admin: User) -> None:
        assert admin_service.delete_user(seeded, admin, "3").ok is True
        assert seeded.get_by_id(RecordKind.USERS, "3") is None
        assert seeded.get_by_id(RecordKind.APPLICATIONS, "a1").candidate_name == "Alex Rivera"

    def test_delete_missing(self, seeded: RecordStore, admin: User) -> None:
        assert admin_service.delete_user(seeded, admin, "ghost").error == ErrorKind.NOT_FOUND


class TestCompanies:
    def test_list(self, seeded: RecordStore, admin: User) -> None:
        assert [c.id for c in admin_service.list_companies(seeded, admin).value] == ["c1", "c2"]

    def test_change_plan(self, seeded: RecordStore, admin: User, now: datetime) -> None:
        result = admin_service.change_company_plan(seeded, admin, "c2", PlanTier.ENTERPRISE, now=now)
        assert result.value.subscription.job_credits == -1

    def test_change_plan_missing_company(self, seeded: RecordStore, admin: User) -> None:
        result = admin_service.change_company_plan(seeded, admin, "ghost", PlanTier.LITE)
        assert result.error == ErrorKind.NOT_FOUND

    def test_change_plan_by_employer_refused(self, seeded: RecordStore, owner: User) -> None:
        result = admin_service.change_company_plan(seeded, owner, "c1", PlanTier.ENTERPRISE)
        assert result.error == ErrorKind.ROLE_VIOLATION
