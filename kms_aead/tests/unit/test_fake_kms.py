import pytest
from botocore.exceptions import ClientError

from kms_aead.testing.fake_kms import FakeKMS

KEY = "arn:aws:kms:us-east-2:1:key/a"


def _code(excinfo) -> str:
    return excinfo.value.response["Error"]["Code"]


def test_fake_is_deterministic_across_instances() -> None:
    blob = FakeKMS().encrypt(KeyId=KEY, Plaintext=b"pt", EncryptionContext={"a": "b"})["CiphertextBlob"]
    again = FakeKMS().encrypt(KeyId=KEY, Plaintext=b"pt", EncryptionContext={"a": "b"})["CiphertextBlob"]
    assert blob == again
    assert FakeKMS().decrypt(KeyId=KEY, CiphertextBlob=blob, EncryptionContext={"a": "b"})["Plaintext"] == b"pt"


def test_different_seeds_do_not_interoperate() -> None:
    blob = FakeKMS(seed=b"one").encrypt(KeyId=KEY, Plaintext=b"pt")["CiphertextBlob"]
    with pytest.raises(ClientError) as excinfo:
        FakeKMS(seed=b"two").decrypt(KeyId=KEY, CiphertextBlob=blob)
    assert _code(excinfo) == "InvalidCiphertextException"


def test_absent_and_empty_context_are_the_same() -> None:
    kms = FakeKMS()
    blob = kms.encrypt(KeyId=KEY, Plaintext=b"pt")["CiphertextBlob"]
    assert kms.decrypt(KeyId=KEY, CiphertextBlob=blob, EncryptionContext={})["Plaintext"] == b"pt"


def test_tampered_ciphertext_is_rejected() -> None:
    kms = FakeKMS()
    blob = bytearray(kms.encrypt(KeyId=KEY, Plaintext=b"pt")["CiphertextBlob"])
    blob[-1] ^= 0x01
    with pytest.raises(ClientError) as excinfo:
        kms.decrypt(KeyId=KEY, CiphertextBlob=bytes(blob))
    assert _code(excinfo) == "InvalidCiphertextException"


def test_wrong_key_is_reported_as_incorrect_key() -> None:
    kms = FakeKMS()
    blob = kms.encrypt(KeyId=KEY, Plaintext=b"pt")["CiphertextBlob"]
    with pytest.raises(ClientError) as excinfo:
        kms.decrypt(KeyId=KEY + "b", CiphertextBlob=blob)
    assert _code(excinfo) == "IncorrectKeyException"


def test_unknown_key_with_allow_list() -> None:
    with pytest.raises(ClientError) as excinfo:
        FakeKMS(key_ids=[KEY]).encrypt(KeyId="arn:aws:kms:us-east-2:1:key/other", Plaintext=b"pt")
    assert _code(excinfo) == "NotFoundException"


@pytest.mark.parametrize("size", [0, 4097])
def test_plaintext_size_limits(size: int) -> None:
    with pytest.raises(ClientError) as excinfo:
        FakeKMS().encrypt(KeyId=KEY, Plaintext=b"x" * size)
    assert _code(excinfo) == "ValidationException"
