"""Test fake implementations for dependency injection testing."""

from fakes.fake_cloud_client import FakeCloudClient

__all__ = ["FakeCloudClient"]
