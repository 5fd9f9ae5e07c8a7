import pytest

from connected_accounts.core.encryption import decrypt_token, encrypt_token


def test_encrypt_token_prefixes_and_decrypts():
    encrypted = encrypt_token("ya29.secret")

    assert encrypted.startswith("enc:")
    assert "ya29.secret" not in encrypted
    assert decrypt_token(encrypted) == "ya29.secret"


def test_encrypt_token_is_idempotent():
    encrypted = encrypt_token("token")

    assert encrypt_token(encrypted) == encrypted


def test_empty_values_pass_through():
    assert encrypt_token("") == ""
    assert decrypt_token("") == ""
    assert encrypt_token(None) is None


def test_decrypt_rejects_plaintext():
    with pytest.raises(ValueError):
        decrypt_token("plaintext")


def test_decrypt_rejects_corrupted_token():
    with pytest.raises(ValueError):
        decrypt_token("enc:not-a-fernet-token")
