import pytest

from kms_aead.client import AwsKmsClient
from kms_aead.testing.fake_kms import FakeKMS

KEY_PREFIX = "aws-kms://arn:aws:kms:us-east-2:235739564943:"
KEY_ALIAS_URI = KEY_PREFIX + "alias/unit-and-integration-testing"
KEY_URI = KEY_PREFIX + "key/3ee50705-5a82-4f5b-9753-05c4f473922f"
KEY_URI_2 = KEY_PREFIX + "key/b3ca2efd-a8fb-47f2-b541-7e20f8c5cd11"


@pytest.fixture
def fake_kms() -> FakeKMS:
    return FakeKMS()


@pytest.fixture
def client(fake_kms: FakeKMS) -> AwsKmsClient:
    return AwsKmsClient(KEY_PREFIX, boto_client=fake_kms)
