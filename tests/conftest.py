"""Shared fixtures for compat-excludes tests."""

from pathlib import Path

import pytest

from compat_excludes.utils.logging import configure_logging

PROCESS_EXCLUDES = '''\
exclude :test_abort, "needs investigation"
exclude :test_gid_sid_available?, "needs investigation"
exclude :test_too_long_path, "works, but dumps a massive amount of text to stdout"
exclude :test_wait2, "needs investigation"
'''

FILE_EXCLUDES = '''\
# File suite
exclude :test_open_nonblock, "hangs on CI"

exclude :test_truncate, "needs investigation"
'''


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep structlog output to errors only while testing."""
    configure_logging(level="error", format_type="text")
    yield


@pytest.fixture
def excludes_dir(tmp_path: Path) -> Path:
    """An exclusion directory with two suites."""
    directory = tmp_path / "excludes"
    directory.mkdir()
    (directory / "TestProcess.rb").write_text(PROCESS_EXCLUDES)
    (directory / "TestFile.rb").write_text(FILE_EXCLUDES)
    return directory


@pytest.fixture
def config_dir(tmp_path: Path, excludes_dir: Path) -> Path:
    """A config directory pointing at ``excludes_dir``."""
    directory = tmp_path / "config"
    directory.mkdir()
    (directory / "defaults.yaml").write_text(
        "excludes:\n"
        "  directory: ../excludes\n"
        "logging:\n"
        "  level: error\n"
        "  format: text\n"
    )
    return directory
