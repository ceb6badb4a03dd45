# Fake implementations for testing

from .fake_s3 import FakeS3Client, FakeStreamingBody, client_error

__all__ = ["FakeS3Client", "FakeStreamingBody", "client_error"]
