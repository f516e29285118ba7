from asistencia.auth.passwords import hash_secret, verify_secret


def test_hash_secret_does_not_store_plain_text() -> None:
    hashed = hash_secret('secreto')

    assert hashed != 'secreto'
    assert verify_secret('secreto', hashed)
    assert not verify_secret('otro', hashed)


def test_verify_secret_rejects_values_that_are_not_hashes() -> None:
    assert not verify_secret('secreto', 'secreto')
    assert not verify_secret('secreto', None)
    assert not verify_secret('secreto', '')


def test_long_secrets_are_accepted() -> None:
    secret = 'x' * 200

    assert verify_secret(secret, hash_secret(secret))
