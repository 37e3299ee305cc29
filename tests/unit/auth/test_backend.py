"""Unit tests for auth backend (JWT and password handling)."""

from datetime import timedelta
from uuid import uuid4

from jose import jwt

from venuin.config import settings
from venuin.core.auth.backend import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from venuin.core.auth.principal import Role


class TestPasswordHashing:
    """Tests for password hashing functions."""

    def test_hash_password_returns_hash(self):
        """hash_password should return a bcrypt hash."""
        password = "mysecretpassword"
        hashed = hash_password(password)

        assert hashed != password
        assert hashed.startswith("$2b$")  # bcrypt prefix

    def test_hash_password_different_each_time(self):
        """hash_password should produce different hashes for same password."""
        password = "mysecretpassword"

        # Different due to random salt
        assert hash_password(password) != hash_password(password)

    def test_verify_password_correct(self):
        """verify_password should return True for correct password."""
        hashed = hash_password("mysecretpassword")

        assert verify_password("mysecretpassword", hashed) is True

    def test_verify_password_incorrect(self):
        """verify_password should return False for incorrect password."""
        hashed = hash_password("mysecretpassword")

        assert verify_password("wrongpassword", hashed) is False


class TestJWTTokens:
    """Tests for JWT token functions."""

    def test_create_access_token_returns_jwt(self):
        """create_access_token should return a JWT string."""
        token = create_access_token(uuid4(), uuid4(), Role.TENANT_ADMIN)

        assert isinstance(token, str)
        # JWT has three parts separated by dots
        assert token.count(".") == 2

    def test_decode_token_valid(self):
        """decode_token should return the user, tenant and role claims."""
        user_id = uuid4()
        tenant_id = uuid4()

        token = create_access_token(user_id, tenant_id, Role.TENANT_USER)
        data = decode_token(token)

        assert data is not None
        assert data.user_id == user_id
        assert data.tenant_id == tenant_id
        assert data.role is Role.TENANT_USER
        assert data.type == "access"

    def test_super_admin_token_has_null_tenant(self):
        """A super admin token carries an explicit null tenant claim."""
        token = create_access_token(uuid4(), None, Role.SUPER_ADMIN)

        payload = jwt.get_unverified_claims(token)
        data = decode_token(token)

        assert "tenant_id" in payload
        assert payload["tenant_id"] is None
        assert data is not None
        assert data.tenant_id is None

    def test_decode_token_invalid(self):
        """decode_token should return None for invalid token."""
        assert decode_token("invalid.token.here") is None

    def test_decode_token_expired(self):
        """decode_token should return None for expired token."""
        token = create_access_token(
            uuid4(),
            uuid4(),
            Role.TENANT_USER,
            expires_delta=timedelta(seconds=-10),
        )

        assert decode_token(token) is None

    def test_decode_token_wrong_signature(self):
        """A token signed with another key is rejected."""
        token = jwt.encode(
            {"sub": str(uuid4()), "tenant_id": str(uuid4()), "role": "tenant_admin", "exp": 4102444800},
            "another-secret-key-that-is-long-enough",
            algorithm=settings.jwt_algorithm,
        )

        assert decode_token(token) is None

    def test_decode_token_without_tenant_claim(self):
        """A token that omits the tenant claim entirely is malformed."""
        token = jwt.encode(
            {"sub": str(uuid4()), "role": "tenant_admin", "type": "access", "exp": 4102444800},
            settings.secret_key,
            algorithm=settings.jwt_algorithm,
        )

        assert decode_token(token) is None

    def test_decode_token_without_type_claim(self):
        """A token that omits the type claim is malformed, not an access token."""
        token = jwt.encode(
            {
                "sub": str(uuid4()),
                "tenant_id": str(uuid4()),
                "role": "tenant_admin",
                "exp": 4102444800,
            },
            settings.secret_key,
            algorithm=settings.jwt_algorithm,
        )

        assert decode_token(token) is None

    def test_decode_token_unknown_role(self):
        """An unknown role claim is rejected."""
        token = create_access_token(
            uuid4(),
            uuid4(),
            Role.TENANT_USER,
            additional_claims={"role": "owner"},
        )

        assert decode_token(token) is None
