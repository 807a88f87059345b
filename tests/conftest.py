import pytest

from gltfcodec.reporting import base


@pytest.fixture(autouse=True)
def _reset_active_reporter():
    """Keep the process-wide reporter from leaking between tests."""
    base._ACTIVE_REPORTER = None
    yield
    base._ACTIVE_REPORTER = None
