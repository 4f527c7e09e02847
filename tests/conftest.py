from __future__ import annotations

import io
import os
import tempfile

# Kivy reads these at import time; pytest's own argv must not reach Kivy.
os.environ.setdefault("KIVY_NO_ARGS", "1")
os.environ.setdefault("KIVY_LOG_MODE", "PYTHON")
os.environ.setdefault("KIVY_NO_FILELOG", "1")
os.environ.setdefault("KIVY_NO_CONSOLELOG", "1")
os.environ.setdefault("KIVY_HOME", os.path.join(tempfile.gettempdir(), "openstaty-kivy-home"))

import pytest  # noqa: E402

from openstaty_app.utils.share_channel import ShareChannel  # noqa: E402
from openstaty_app.utils.share_intake import ShareIntake  # noqa: E402


class FakeResolver:
    """In-memory content provider: ref -> (display name, bytes)."""

    def __init__(self):
        self.items: dict[str, tuple[str | None, bytes]] = {}
        self.broken_names: set[str] = set()
        self.unopenable: set[str] = set()
        self.read_errors: set[str] = set()

    def add(self, ref: str, data: bytes, name: str | None = None) -> str:
        self.items[ref] = (name, data)
        return ref

    def display_name(self, ref: str) -> str:
        if ref in self.broken_names:
            raise RuntimeError("metadata query failed")
        name, _ = self.items[ref]
        return name or ""

    def open(self, ref: str):
        if ref in self.unopenable or ref not in self.items:
            raise OSError(f"cannot open {ref}")
        data = self.items[ref][1]
        if ref in self.read_errors:
            return _FailingStream()
        return io.BytesIO(data)


class _FailingStream(io.RawIOBase):
    def readable(self):
        return True

    def readinto(self, b):
        raise OSError("read failed")


@pytest.fixture()
def resolver():
    return FakeResolver()


@pytest.fixture()
def channel():
    return ShareChannel()


@pytest.fixture()
def cache_dir(tmp_path):
    d = tmp_path / "cache"
    d.mkdir()
    return d


@pytest.fixture()
def intake(channel, resolver, cache_dir):
    return ShareIntake(channel, resolver=resolver, cache_dir=str(cache_dir))
