import pytest

from recovery_register.app.services.client_sanitizer import (
    DEFAULT_SENSITIVE_FIELDS,
    mask,
    mask_email,
    mask_identifier,
    mask_phone,
    mask_real_name,
    sanitize,
    sanitize_for_log,
    sanitize_many,
)
from recovery_register.domain.entities import Identity, IdentityType, Role
from tests.fixtures.json_loader import TestDataLoader


@pytest.fixture
def record():
    return TestDataLoader.get_copy("full_identity_record")


def test_sanitize_drops_every_sensitive_field(record):
    result = sanitize(record)

    for field in DEFAULT_SENSITIVE_FIELDS:
        assert field not in result
    assert result["id"] == 7
    assert result["username"] == "dana"
    assert result["role"] == "user"


def test_sanitize_does_not_mutate_input(record):
    sanitize(record)

    assert record["email"] == "dana@example.com"
    assert record["password_hash"]


def test_sanitize_none_passes_through():
    assert sanitize(None) is None


def test_sanitize_rejects_non_records():
    with pytest.raises(TypeError):
        sanitize(42)


def test_sanitize_recurses_into_nested_records():
    result = sanitize(
        {
            "id": 1,
            "profile": {"username": "dana", "email": "dana@example.com"},
            "contacts": [{"name": "Walter", "phone": "555-1234", "kind": "sponsor"}],
        }
    )

    assert result == {
        "id": 1,
        "profile": {"username": "dana"},
        "contacts": [{"kind": "sponsor"}],
    }


def test_sanitize_accepts_models_and_extra_fields():
    identity = Identity(
        id=3,
        username="erin",
        email="erin@example.com",
        password_hash="hash",
        identity_type=IdentityType.email,
        is_anonymous=False,
        role=Role.user,
    )

    result = sanitize(identity, extra_sensitive_fields=("last_login_at",))

    assert "email" not in result
    assert "password_hash" not in result
    assert "last_login_at" not in result
    assert result["username"] == "erin"


def test_sanitize_many_keeps_order():
    result = sanitize_many([{"id": 1, "email": "a@b.c"}, {"id": 2, "phone": "1"}])

    assert result == [{"id": 1}, {"id": 2}]


def test_mask_email():
    assert mask_email("dana@example.com") == "da****@example.com"
    assert mask_email("d@example.com") == "d****@example.com"
    assert mask_email("no-at-sign") == "****"


def test_mask_phone():
    assert mask_phone("555-867-5309") == "***-***-5309"
    assert mask_phone("12") == "***-***-****"


def test_mask_real_name():
    assert mask_real_name("Dana Katherine Scully") == "D. S."
    assert mask_real_name("Dana") == "D."


def test_mask_keeps_masked_keys_and_drops_other_sensitive_fields(record):
    result = mask(record)

    assert result["email"] == "da****@example.com"
    assert result["phone"] == "***-***-5309"
    assert "password_hash" not in result
    assert "passwordHash" not in result
    assert "oauth_tokens" not in result
    assert "recovery_hash" not in result
    assert result["username"] == "dana"


def test_mask_identifier():
    assert mask_identifier("dana@example.com") == "da****@example.com"
    assert mask_identifier("dana") == "da****"
    assert mask_identifier("") == "<empty>"


def test_sanitize_for_log_drops_secrets_and_masks_identifier():
    result = sanitize_for_log(
        {"identifier": "dana@example.com", "password": "hunter22", "token": "t", "action": "login"}
    )

    assert result == {"identifier": "da****@example.com", "action": "login"}
