"""
Account and session service tests.

Verifies:
- The default administrator is created once and cannot be removed
- Usernames are unique and matched case-insensitively
- First-login flag lifecycle (create, change, reset)
- Session validation, idle timeout and revocation
"""

from datetime import timedelta

import pytest

from quinzena.extensions import db
from quinzena.models import ROLE_ADMIN, ROLE_USER, SessionToken
from quinzena.services import auth_service
from quinzena.services import session_service
from quinzena.services.auth_service import (
    AuthError,
    PasswordValidationError,
    ProtectedUserError,
    UserNotFoundError,
    UsernameTakenError,
)
from quinzena.time_utils import utcnow


# =============================================================================
# ACCOUNTS
# =============================================================================


class TestDefaultAdmin:
    def test_created_once(self, db_session):
        first = auth_service.ensure_default_admin()
        second = auth_service.ensure_default_admin()

        assert first.id == second.id
        assert first.username == "ADM"
        assert first.role == ROLE_ADMIN
        assert first.is_first_login is True
        assert len(auth_service.list_users()) == 1

    def test_cannot_be_deleted(self, admin_user):
        with pytest.raises(ProtectedUserError):
            auth_service.delete_user(admin_user.id)

    def test_cannot_be_demoted(self, admin_user):
        with pytest.raises(ProtectedUserError):
            auth_service.update_user(admin_user.id, {"role": ROLE_USER})

    def test_cannot_be_deactivated(self, admin_user):
        with pytest.raises(ProtectedUserError):
            auth_service.update_user(admin_user.id, {"is_active": False})


class TestCreateUser:
    def test_username_is_unique_case_insensitive(self, regular_user):
        with pytest.raises(UsernameTakenError):
            auth_service.create_user(username="ANA", password="outra123", name="Outra Ana")

    def test_short_password(self, db_session):
        with pytest.raises(PasswordValidationError):
            auth_service.create_user(username="carla", password="12345", name="Carla")

    def test_name_required(self, db_session):
        with pytest.raises(AuthError):
            auth_service.create_user(username="carla", password="123456", name="  ")

    def test_unknown_role(self, db_session):
        with pytest.raises(AuthError):
            auth_service.create_user(username="carla", password="123456", name="Carla", role="owner")

    def test_password_is_hashed(self, regular_user):
        assert regular_user.password_hash != "segredo1"
        assert auth_service.verify_password("segredo1", regular_user.password_hash)


class TestAuthenticate:
    def test_case_insensitive_username(self, regular_user):
        user = auth_service.authenticate("ANA", "segredo1")
        assert user is not None
        assert user.id == regular_user.id
        assert user.last_login_at is not None

    def test_wrong_password(self, regular_user):
        assert auth_service.authenticate("ana", "errada") is None

    def test_unknown_user(self, db_session):
        assert auth_service.authenticate("ninguem", "segredo1") is None

    def test_inactive_user(self, regular_user):
        auth_service.update_user(regular_user.id, {"is_active": False})
        assert auth_service.authenticate("ana", "segredo1") is None

    def test_malformed_hash(self, regular_user):
        assert auth_service.verify_password("segredo1", "not-a-hash") is False


class TestPasswordLifecycle:
    def test_change_clears_first_login(self, regular_user):
        user = auth_service.change_password(regular_user.id, "novasenha")
        assert user.is_first_login is False
        assert auth_service.authenticate("ana", "novasenha") is not None
        assert auth_service.authenticate("ana", "segredo1") is None

    def test_reset_sets_first_login(self, regular_user):
        auth_service.change_password(regular_user.id, "novasenha")
        user = auth_service.reset_password(regular_user.id)
        assert user.is_first_login is True
        assert auth_service.authenticate("ana", "123456") is not None

    def test_unknown_user(self, db_session):
        with pytest.raises(UserNotFoundError):
            auth_service.change_password(999, "novasenha")


class TestUpdateAndDelete:
    def test_update_fields(self, regular_user):
        user = auth_service.update_user(regular_user.id, {"name": "Ana Maria", "role": ROLE_ADMIN})
        assert user.name == "Ana Maria"
        assert user.is_admin

    def test_delete_removes_sessions(self, regular_user):
        session_service.create_session(regular_user.id)
        user_id = regular_user.id

        auth_service.delete_user(user_id)

        assert db.session.query(SessionToken).filter_by(user_id=user_id).count() == 0
        with pytest.raises(UserNotFoundError):
            auth_service.get_user(user_id)


# =============================================================================
# SESSIONS
# =============================================================================


class TestSessions:
    def test_token_is_stored_hashed(self, regular_user):
        session, token = session_service.create_session(regular_user.id)
        assert session.token_hash == session_service.hash_token(token)
        assert session.token_hash != token
        assert len(token) == 64

    def test_validate(self, regular_user):
        _, token = session_service.create_session(regular_user.id)
        assert session_service.validate_session(token).id == regular_user.id
        assert session_service.validate_session("bogus") is None

    def test_revoke(self, regular_user):
        _, token = session_service.create_session(regular_user.id)
        assert session_service.revoke_session(token) is True
        assert session_service.revoke_session(token) is False
        assert session_service.validate_session(token) is None

    def test_idle_timeout(self, regular_user):
        session, token = session_service.create_session(regular_user.id)
        session.last_used_at = utcnow() - session_service.SESSION_IDLE_TIMEOUT - timedelta(minutes=1)
        db.session.commit()

        assert session_service.validate_session(token) is None
        assert session.is_revoked is True

    def test_absolute_timeout(self, regular_user):
        session, token = session_service.create_session(regular_user.id)
        session.expires_at = utcnow() - timedelta(seconds=1)
        db.session.commit()

        assert session_service.validate_session(token) is None

    def test_deactivated_user(self, regular_user):
        _, token = session_service.create_session(regular_user.id)
        auth_service.update_user(regular_user.id, {"is_active": False})
        assert session_service.validate_session(token) is None

    def test_revoke_all_keeps_current(self, regular_user):
        _, current = session_service.create_session(regular_user.id)
        _, other = session_service.create_session(regular_user.id)
        _, third = session_service.create_session(regular_user.id)

        revoked = session_service.revoke_all_user_sessions(regular_user.id, keep_token=current)

        assert revoked == 2
        assert session_service.validate_session(current) is not None
        assert session_service.validate_session(other) is None
        assert session_service.validate_session(third) is None
