"""Tests for registration, sign-in and sessions."""
from datetime import timedelta

from data.database.auth_models import AuthSession, AuthUser
from data.database.connection import utcnow
from src.services import auth_service
from tests.conftest import PASSWORD, register


class TestPasswords:

    def test_hash_round_trip(self):
        hashed = auth_service.hash_password("hunter22")
        assert hashed.startswith("pbkdf2_sha256$")
        assert auth_service.verify_password("hunter22", hashed)
        assert not auth_service.verify_password("hunter23", hashed)

    def test_salts_differ(self):
        assert auth_service.hash_password("same") != auth_service.hash_password("same")

    def test_malformed_hash(self):
        assert not auth_service.verify_password("x", "not-a-hash")
        assert not auth_service.verify_password("x", "md5$1$salt$digest")


class TestSignUp:

    def test_normalises_email_and_stores_metadata(self, db):
        result = auth_service.sign_up(db, "Ana", "Lopez", "  Ana@Example.COM ", PASSWORD)
        assert result["success"]
        user = result["user"]
        assert user.email == "ana@example.com"
        assert user.user_metadata["full_name"] == "Ana Lopez"
        assert user.password_hash != PASSWORD

    def test_rejects_short_password(self, db):
        result = auth_service.sign_up(db, "Ana", "", "ana@example.com", "12345")
        assert result["error"] == "Password must be at least 6 characters long."

    def test_rejects_invalid_email(self, db):
        assert auth_service.sign_up(db, "Ana", "", "ana", PASSWORD)["error"] == "Please enter a valid email address."

    def test_rejects_duplicate_email(self, db, buyer):
        result = auth_service.sign_up(db, "Other", "", "BUYER@example.com", PASSWORD)
        assert result["error"].startswith("This email is already registered.")
        assert db.query(AuthUser).count() == 1


class TestSessions:

    def test_sign_in_issues_token(self, db, buyer):
        result = auth_service.sign_in(db, "buyer@example.com", PASSWORD)
        assert result["success"]
        assert result["session"].user_id == buyer.id
        assert result["profile"].id == buyer.id

        current = auth_service.get_current_user(db, result["session"].token)
        assert current["user"].email == "buyer@example.com"

    def test_wrong_password(self, db, buyer):
        result = auth_service.sign_in(db, "buyer@example.com", "wrong-password")
        assert not result["success"]
        assert "Invalid email or password" in result["error"]

    def test_unknown_email(self, db):
        assert not auth_service.sign_in(db, "ghost@example.com", PASSWORD)["success"]

    def test_sign_out_revokes_token(self, db, buyer):
        token = auth_service.sign_in(db, "buyer@example.com", PASSWORD)["session"].token
        assert auth_service.sign_out(db, token)["success"]
        assert auth_service.get_session(db, token)["session"] is None

    def test_expired_session_is_removed(self, db, buyer):
        token = auth_service.sign_in(db, "buyer@example.com", PASSWORD)["session"].token
        session = db.get(AuthSession, token)
        session.expires_at = utcnow() - timedelta(minutes=1)
        db.commit()

        result = auth_service.get_session(db, token)
        assert result["session"] is None
        assert result["error"] == "Session expired"
        assert db.query(AuthSession).count() == 0

    def test_anonymous(self, db):
        assert auth_service.get_current_user(db, None) == {"success": False, "user": None, "profile": None}


class TestPasswordReset:

    def test_same_answer_for_known_and_unknown_addresses(self, db):
        register(db, "known@example.com")
        known = auth_service.reset_password(db, "known@example.com")
        unknown = auth_service.reset_password(db, "unknown@example.com")
        assert known == unknown
        assert known["success"]

    def test_invalid_address(self, db):
        assert not auth_service.reset_password(db, "nope")["success"]
