import pytest


@pytest.fixture
def key_hex():
    """Hex of the RFC 4226 / RFC 6238 test secret "12345678901234567890"."""
    return b"12345678901234567890".hex()


@pytest.fixture
def secret_b32():
    return "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
