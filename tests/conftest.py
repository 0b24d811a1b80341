from __future__ import annotations

import sys
from pathlib import Path

import pytest


# Ensure the project root is on ``sys.path`` so tests can import ``yam_icons``
# without requiring the package to be installed in the environment.  This mirrors
# how the package is used from a checkout while keeping the tests self-contained.
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    # ``insert`` keeps the repo ahead of any site-packages entry so that the
    # in-tree modules are exercised.
    sys.path.insert(0, str(_PROJECT_ROOT))

from tests._icon_helpers import RecordingCache, RecordingScaler  # noqa: E402
from yam_icons.registry import IconSetRegistry  # noqa: E402


@pytest.fixture
def registry() -> IconSetRegistry:
    """A registry isolated from the process-wide default."""

    return IconSetRegistry()


@pytest.fixture
def recording_cache() -> RecordingCache:
    return RecordingCache()


@pytest.fixture
def recording_registry(recording_cache: RecordingCache) -> IconSetRegistry:
    return IconSetRegistry(image_cache=recording_cache)  # type: ignore[arg-type]


@pytest.fixture
def scaler() -> RecordingScaler:
    return RecordingScaler()
