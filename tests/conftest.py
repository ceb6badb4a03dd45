"""Root pytest configuration for blocks-s3 tests."""
import pytest

from blocks_s3.multihash import Multihash
from blocks_s3.storage.s3_store import S3BlockStore
from .storage.fakes.fake_s3 import FakeS3Client

TEST_BUCKET = "test-bucket"


# Configure pytest markers
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires a real S3 bucket)"
    )


@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    """Keep ambient AWS and store configuration out of tests."""
    for var in [
        "BLOCKS_S3_BUCKET",
        "BLOCKS_S3_PREFIX",
        "BLOCKS_S3_REGION",
        "BLOCKS_S3_SSE",
        "BLOCKS_S3_ENDPOINT_URL",
        "BLOCKS_S3_MAX_ATTEMPTS",
        "AWS_ACCESS_KEY_ID",
        "AWS_SECRET_ACCESS_KEY",
        "AWS_SESSION_TOKEN",
    ]:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def fake_s3():
    """Standard fake S3 client for testing."""
    return FakeS3Client()


@pytest.fixture
def store(fake_s3):
    """Standard block store under the foo/bar/ prefix."""
    return S3BlockStore(fake_s3, TEST_BUCKET, prefix="foo/bar/")


@pytest.fixture
def mhash():
    """The sha1-tagged multihash 11040123abcd."""
    return Multihash.from_hex("11040123abcd")
