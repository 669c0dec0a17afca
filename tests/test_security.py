from datetime import timedelta

from app.services.password_service import PasswordHasher
from app.services.token_service import TokenService


def test_hash_is_salted_and_verifies(hasher):
    first = hasher.hash("secret123")
    second = hasher.hash("secret123")

    assert first != second
    assert "secret123" not in first
    assert hasher.verify("secret123", first)
    assert hasher.verify("secret123", second)
    assert not hasher.verify("wrong", first)


def test_verify_with_garbage_digest_returns_false(hasher):
    assert hasher.verify("secret123", "not-a-bcrypt-hash") is False


def test_cost_factor_is_configurable():
    digest = PasswordHasher(rounds=5).hash("secret123")
    assert digest.startswith("$2b$05$")


def test_issue_and_verify_round_trip(tokens):
    token = tokens.issue({"id": 7, "name": "Alice", "email": "alice@example.com", "role": "CLIENT"})
    claims = tokens.verify(token)

    assert claims["id"] == 7
    assert claims["role"] == "CLIENT"
    assert "exp" in claims


def test_expired_bad_signature_and_garbage_are_rejected_uniformly(tokens):
    expired = tokens.issue({"id": 1}, expires_delta=timedelta(seconds=-10))
    foreign = TokenService(secret="other-secret").issue({"id": 1})

    assert tokens.verify(expired) is None
    assert tokens.verify(foreign) is None
    assert tokens.verify("definitely.not.ajwt") is None


def test_extract_bearer():
    assert TokenService.extract_bearer("Bearer abc.def.ghi") == "abc.def.ghi"
    assert TokenService.extract_bearer(None) is None
    assert TokenService.extract_bearer("") is None
    assert TokenService.extract_bearer("Basic dXNlcjpwYXNz") is None
    assert TokenService.extract_bearer("Bearer") is None
    assert TokenService.extract_bearer("Bearer a b") is None
