"""Root pytest configuration for test discovery and auto-skip behavior.

All tests are collected, while tests that need external services are
auto-skipped unless explicitly enabled via environment variables or
pytest options.

Test Structure:
    tests/
    ├── knotes/                # Shared kernel, storage wiring, API, CLI
    │   ├── unit/              # Fast, isolated tests
    │   └── integration/       # API tests against a throwaway SQLite file
    ├── knotes_identity/       # Identity domain tests (users, auth, sessions)
    │   ├── unit/
    │   └── integration/       # Repository tests (SQLite, PostgreSQL opt-in)
    └── shared/                # Shared fixtures and utilities

Environment Variables:
    RUN_INTEGRATION=1    Run @pytest.mark.integration tests (PostgreSQL)
    RUN_ALL_TESTS=1      Run all tests (overrides other settings)

Pytest Options:
    --run-integration    Run integration tests
    --run-all            Run all tests
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

from knotes_config import clear_settings_cache

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Load .env.dev for tests (same as local development)
CONFIG_DIR = PROJECT_ROOT / "config"
if (CONFIG_DIR / ".env.dev").exists():
    load_dotenv(CONFIG_DIR / ".env.dev")
elif (CONFIG_DIR / ".env").exists():
    load_dotenv(CONFIG_DIR / ".env")

# The only required setting; tests never need a real secret
os.environ.setdefault("SESSION_SECRET", "test-session-secret-for-testing-only")


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests marked with @pytest.mark.integration",
    )
    parser.addoption(
        "--run-all",
        action="store_true",
        default=False,
        help="Run all tests regardless of markers",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: Tests that need PostgreSQL via testcontainers (auto-skipped)",
    )


def _flag(value: str) -> bool:
    return value.lower() in ("1", "true", "yes")


def pytest_collection_modifyitems(config, items):
    """Auto-skip integration tests unless explicitly enabled."""
    if config.getoption("--run-all") or _flag(os.environ.get("RUN_ALL_TESTS", "")):
        return

    run_integration = config.getoption("--run-integration") or _flag(
        os.environ.get("RUN_INTEGRATION", ""),
    )
    if run_integration:
        return

    skip_integration = pytest.mark.skip(
        reason="Integration test - run with --run-integration or RUN_INTEGRATION=1",
    )
    for item in items:
        # Explicit marker only (includes marks on fixture params)
        item_markers = {mark.name for mark in item.iter_markers()}
        if "integration" in item_markers:
            item.add_marker(skip_integration)


@pytest.fixture(autouse=True)
def fresh_settings_cache():
    """Drop cached settings around every test.

    Tests that tweak environment variables must not leak a stale Settings
    object into the next test.
    """
    clear_settings_cache()
    yield
    clear_settings_cache()
