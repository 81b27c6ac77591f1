# tests/utils/test_security.py
from vm_inventory.utils.security import hash_password, verify_password


def test_hash_is_not_plaintext():
    password_hash = hash_password("secret")

    assert password_hash != "secret"
    assert password_hash.startswith("$pbkdf2-sha256$")

def test_hash_is_salted():
    assert hash_password("secret") != hash_password("secret")

def test_verify_password():
    password_hash = hash_password("secret")

    assert verify_password("secret", password_hash)
    assert not verify_password("wrong", password_hash)

def test_verify_password_with_unknown_hash_format():
    assert not verify_password("secret", "plain-text-not-a-hash")
    assert not verify_password("secret", None)
