import sys
from pathlib import Path

# Ensure package import for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from Sort_Stream.config import Config
from Sort_Stream.engine.context import RunContext
from Sort_Stream.engine.pacing import PacingPolicy


@pytest.fixture(autouse=True)
def _reset_config() -> None:
    """Restore class-level configuration around each test."""

    Config.reset()
    yield
    Config.reset()


@pytest.fixture
def instant_context() -> RunContext:
    """A run context that never sleeps."""

    return RunContext(pacing=PacingPolicy.instant())
