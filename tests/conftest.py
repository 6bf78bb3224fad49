import os

import pytest


class FakeRegistry:
    """In-memory registry backend: {key_path: {child_name: default_value}}."""

    def __init__(self, keys=None, errors=None):
        self.keys = keys or {}
        self.errors = errors or {}
        self.open_handles = []

    def open_key(self, key_path):
        if key_path in self.errors:
            raise self.errors[key_path]
        if key_path not in self.keys:
            raise FileNotFoundError(key_path)
        self.open_handles.append(key_path)
        return key_path

    def subkeys(self, handle):
        return list(self.keys[handle])

    def default_value(self, handle, subkey_name):
        value = self.keys[handle][subkey_name]
        if isinstance(value, Exception):
            raise value
        return value

    def close_key(self, handle):
        self.open_handles.remove(handle)


@pytest.fixture
def fake_registry():
    return FakeRegistry


@pytest.fixture
def make_file():
    def _make(path, content=b"x", mtime=None):
        os.makedirs(os.path.dirname(str(path)), exist_ok=True)
        with open(path, "wb") as f:
            f.write(content)
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return str(path)
    return _make
