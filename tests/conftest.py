"""Test configuration and shared fixtures."""

import pytest

from policystatus.status import metrics as status_metrics


@pytest.fixture(autouse=True)
def _reset_status_metrics():
    status_metrics.reset_metrics()
    yield
