"""Pytest configuration: set test env before any textscanner imports so module-level apps use test values."""

import os
import tempfile

import pytest

# Set before textscanner.config is used so settings never point at a real upload dir
_tmp = tempfile.mkdtemp(prefix="textscanner_test_")
os.environ.setdefault("TEXTSCANNER_UPLOAD_DIR", os.path.join(_tmp, "uploads"))
os.environ.setdefault("TEXTSCANNER_STORAGE_SERVICE_URL", "http://storage.test")
os.environ.setdefault("TEXTSCANNER_LOG_LEVEL", "DEBUG")


@pytest.fixture
def settings(tmp_path):
    """Settings isolated to a per-test upload dir."""
    from textscanner.config import Settings

    return Settings(
        upload_dir=tmp_path / "uploads",
        storage_service_url="http://storage.test",
        storage_timeout_seconds=5.0,
    )
