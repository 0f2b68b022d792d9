import sys
from unittest import mock

import pytest


@pytest.fixture(autouse=True)
def keep_excepthook():
    """Logging setup replaces sys.excepthook, restore it after each test."""
    with mock.patch.object(sys, "excepthook", sys.excepthook):
        yield
