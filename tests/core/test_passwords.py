"""Password hashing — salted PBKDF2 storage format and verification."""

from bugle.core.passwords import hash_password, verify_password


def test_hash_is_salted():
    assert hash_password("hunter2") != hash_password("hunter2")


def test_stored_form_never_contains_password():
    stored = hash_password("hunter2")
    assert "hunter2" not in stored
    assert stored.startswith("pbkdf2_sha256$")
    assert len(stored.split("$")) == 4


def test_verify_accepts_correct_password():
    assert verify_password("hunter2", hash_password("hunter2"))


def test_verify_rejects_wrong_password():
    assert not verify_password("hunter3", hash_password("hunter2"))


def test_verify_never_raises_on_malformed_hash():
    for stored in ["", "plaintext", "md5$1$a$b", "pbkdf2_sha256$many$a$b", "pbkdf2_sha256$1$!!$??"]:
        assert verify_password("hunter2", stored) is False
