import os
import sys

import pytest

# Ensure repo root is on sys.path for tests so package imports resolve
repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if repo_root not in sys.path:
    sys.path.insert(0, repo_root)

from sniff_backend import metrics  # noqa: E402
from sniff_console.models.can_frame import CanFrame  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_metrics():
    metrics.reset_all()
    yield
    metrics.reset_all()


@pytest.fixture
def make_frame():
    """Factory building frames from an id, a list of byte values and a timestamp."""
    def _make(can_id, data, timestamp=0.0):
        return CanFrame(can_id=can_id, data=bytes(data), timestamp=timestamp)
    return _make
