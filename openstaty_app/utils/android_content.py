from __future__ import annotations

import os
import tempfile
from typing import BinaryIO
from urllib.parse import unquote

from kivy.utils import platform

from openstaty_app.config import cache_dir_override


def _strip_file_scheme(p: str) -> str:
    p = str(p or "").strip()
    if p.startswith("file://"):
        return unquote(p[len("file://") :])
    return p


class LocalContentResolver:
    """
    Desktop/dev resolver: content references are plain paths or file:// URIs.
    """

    def display_name(self, ref: str) -> str:
        return os.path.basename(_strip_file_scheme(ref))

    def open(self, ref: str) -> BinaryIO:
        path = _strip_file_scheme(ref)
        if not path:
            raise OSError("Empty content reference")
        return open(path, "rb")


class AndroidContentResolver:
    """
    Resolves content:// URIs through the activity's ContentResolver (PyJNIus).
    """

    def __init__(self) -> None:
        from jnius import autoclass  # type: ignore

        PythonActivity = autoclass("org.kivy.android.PythonActivity")
        self._Uri = autoclass("android.net.Uri")
        self._OpenableColumns = autoclass("android.provider.OpenableColumns")
        ctx = PythonActivity.mActivity.getApplicationContext()
        self._resolver = ctx.getContentResolver()

    def _parse(self, ref: str):
        return self._Uri.parse(str(ref))

    def display_name(self, ref: str) -> str:
        cursor = None
        try:
            cursor = self._resolver.query(self._parse(ref), None, None, None, None)
            if cursor and cursor.moveToFirst():
                idx = int(cursor.getColumnIndex(self._OpenableColumns.DISPLAY_NAME))
                if idx >= 0:
                    return str(cursor.getString(idx) or "")
            return ""
        finally:
            try:
                if cursor:
                    cursor.close()
            except Exception:
                pass

    def open(self, ref: str) -> BinaryIO:
        # The detached fd is owned by the returned file object.
        pfd = self._resolver.openFileDescriptor(self._parse(ref), "r")
        if pfd is None:
            raise OSError(f"Unable to open content reference: {ref}")
        return os.fdopen(int(pfd.detachFd()), "rb")


def default_resolver():
    if platform == "android":
        return AndroidContentResolver()
    return LocalContentResolver()


def _android_cache_dir() -> str:
    from jnius import autoclass  # type: ignore

    PythonActivity = autoclass("org.kivy.android.PythonActivity")
    ctx = PythonActivity.mActivity.getApplicationContext()
    return str(ctx.getCacheDir().getAbsolutePath())


def app_cache_dir() -> str:
    """
    Return the process-private cache directory used for shared content.

    - Android: Context.getCacheDir().
    - Desktop/dev: OPENSTATY_CACHE_DIR, else the running App's user_data_dir/cache,
      else a temp directory.
    """
    if platform == "android":
        return _android_cache_dir()

    override = cache_dir_override()
    if override:
        return override
    try:
        from kivy.app import App

        app = App.get_running_app()
        if app and getattr(app, "user_data_dir", None):
            return os.path.join(str(app.user_data_dir), "cache")
    except Exception:
        pass
    return os.path.join(tempfile.gettempdir(), "openstaty", "cache")
