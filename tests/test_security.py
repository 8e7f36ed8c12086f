from datetime import timedelta

import jwt
import pytest

from bulklog.errors import Unauthenticated
from bulklog.security import bearer_token, hash_password, issue_token, verify_password, verify_token
from bulklog.settings import Settings


@pytest.fixture
def token_settings():
    return Settings(jwt_secret="unit-secret", _env_file=None)


class TestTokens:

    def test_round_trip_claims(self, token_settings):
        token = issue_token(token_settings, 7, "lifter@example.com", "Lifter")
        claims = verify_token(token_settings, token)

        assert (claims.user_id, claims.email, claims.name) == (7, "lifter@example.com", "Lifter")

    def test_seven_day_window(self, token_settings):
        token = issue_token(token_settings, 1, "a@b.c", "A")
        payload = jwt.decode(token, "unit-secret", algorithms=["HS256"])

        assert payload["exp"] - payload["iat"] == int(timedelta(days=7).total_seconds())

    def test_expired(self, token_settings):
        token = issue_token(token_settings, 1, "a@b.c", "A", expires_in=timedelta(seconds=-1))

        with pytest.raises(Unauthenticated):
            verify_token(token_settings, token)

    def test_wrong_secret(self, token_settings):
        other = Settings(jwt_secret="someone-else", _env_file=None)
        token = issue_token(other, 1, "a@b.c", "A")

        with pytest.raises(Unauthenticated):
            verify_token(token_settings, token)

    def test_missing_claims(self, token_settings):
        token = jwt.encode({"sub": "1"}, "unit-secret", algorithm="HS256")

        with pytest.raises(Unauthenticated):
            verify_token(token_settings, token)

    @pytest.mark.parametrize("token", [None, ""])
    def test_missing(self, token_settings, token):
        with pytest.raises(Unauthenticated, match="Missing auth token."):
            verify_token(token_settings, token)


class TestPasswords:

    def test_hash_and_verify(self):
        hashed = hash_password("correct horse", rounds=4)

        assert hashed != "correct horse"
        assert verify_password("correct horse", hashed)
        assert not verify_password("wrong horse", hashed)

    def test_unknown_user_never_matches(self):
        assert verify_password("anything", None, rounds=4) is False

    def test_non_bcrypt_hash(self):
        assert verify_password("anything", "plain-text", rounds=4) is False


@pytest.mark.parametrize("header, expected", [
    ("Bearer abc.def.ghi", "abc.def.ghi"),
    ("Bearer ", None),
    ("Basic abc", None),
    (None, None),
])
def test_bearer_token(header, expected):
    assert bearer_token(header) == expected
