"""
Pytest configuration and shared fixtures for jsont-core tests.
"""

import io
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from jsont_core.logging import LogConfig, TemplateLogger  # noqa: E402
from jsont_core.template import TemplateEngine  # noqa: E402
from jsont_core.types import LogFormat, LogLevel  # noqa: E402


# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """Directory with a few template files."""
    root = tmp_path / "templates"
    (root / "pages").mkdir(parents=True)
    (root / "greeting.html.jsont").write_text("Hello {name}\n", encoding="utf-8")
    (root / "pages" / "index.html.jsont").write_text(
        "default-formatter: html\n\n<h1>{title}</h1>\n", encoding="utf-8"
    )
    return root


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def engine() -> TemplateEngine:
    """TemplateEngine with default configuration."""
    return TemplateEngine()


@pytest.fixture
def log_output() -> io.StringIO:
    """Buffer the test logger writes to."""
    return io.StringIO()


@pytest.fixture
def json_logger(log_output: io.StringIO) -> TemplateLogger:
    """TemplateLogger writing JSON lines at DEBUG level."""
    return TemplateLogger(
        LogConfig(level=LogLevel.DEBUG, format=LogFormat.JSON, output=log_output)
    )


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "property: Property-based tests (hypothesis)")
