"""
Shared fixtures: an in-memory remote standing in for the HTTP fetcher.
"""

import pytest

from scriptbundle.config import Settings
from scriptbundle.errors import FetchError


class FakeRemote:
    """Fetcher serving text from a dict and recording every address asked for."""

    def __init__(self, files=None):
        self.files = dict(files or {})
        self.calls = []
        self.closed = False

    def __call__(self, address):
        self.calls.append(address)
        if address not in self.files:
            raise FetchError(address, "HTTP 404")
        return self.files[address].splitlines()

    def close(self):
        self.closed = True


HELPERS = """\
CONST_X = 1
def helper_fn():
    return 1

CONST_Y = 2"""


@pytest.fixture
def settings():
    return Settings(root_directory="/r")


@pytest.fixture
def remote():
    return FakeRemote({"/r/common/helpers.py": HELPERS})
