"""Test helpers for code built on kms-aead."""
from .fake_kms import FakeKMS

__all__ = ["FakeKMS"]
