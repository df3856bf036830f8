"""
Shared pytest fixtures for the gulp test suite.

Provides a capturing shell session, an open resource store in a temp
directory, and a config whose files all live under tmp_path.

Usage in tests:
    def test_something(ctx, shell):
        shell.execute_line("echo hi")
        assert ctx.output.get_output() == "hi\\n"

    def test_with_store(store):
        store.insert("servers", host="example.com", port=80)
"""

import pytest

from gulp.config import Config, LoggingConfig, StoreConfig
from gulp.exclusion import ExclusionRuleManager
from gulp.logs import shutdown_logging
from gulp.output import BufferedOutput
from gulp.shell import CommandContext, Services, Shell
from gulp.store import ResourceStore


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's environment out of config and color detection."""
    for key in ("GULP_COLOR", "GULP_LOG_LEVEL", "GULP_LOG_DIR", "GULP_STORE_PATH",
                "GULP_INIT_WORKERS", "NO_COLOR", "FORCE_COLOR"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def clean_logging():
    """Remove handlers installed by init_logging() during a test."""
    yield
    shutdown_logging()


@pytest.fixture
def config(tmp_path):
    """Config with logs and store under tmp_path."""
    return Config(
        logging=LoggingConfig(level="DEBUG", directory=str(tmp_path / "logs")),
        store=StoreConfig(path=str(tmp_path / "db" / "resources.sqlite3")),
    )


@pytest.fixture
def store(tmp_path):
    """Open resource store, closed after the test."""
    s = ResourceStore()
    s.open_at(tmp_path / "db" / "resources.sqlite3")
    yield s
    s.close()


@pytest.fixture
def output():
    return BufferedOutput()


@pytest.fixture
def services():
    return Services(exclusions=ExclusionRuleManager())


@pytest.fixture
def ctx(output, services):
    """Capturing shell session in Encode Mode."""
    context = CommandContext(output=output, services=services)
    yield context
    context.close()


@pytest.fixture
def shell(ctx):
    return Shell(ctx)
