from __future__ import annotations

from typing import Callable

from kivy.utils import platform

from openstaty_app.config import log_tag

_log_fns: dict[str, Callable[[str], None]] = {}


def _make_log_fn(tag: str) -> Callable[[str], None]:
    try:
        if platform == "android":
            from jnius import autoclass  # type: ignore

            Log = autoclass("android.util.Log")

            def _android_log(msg: str) -> None:
                Log.d(tag, str(msg))

            return _android_log
    except Exception:
        pass
    return lambda msg: print(f"[{tag}] {msg}")


def log(message: str, *, tag: str | None = None) -> None:
    """Log to Android logcat when available; fallback to print. Never raises."""
    t = tag or log_tag()
    try:
        fn = _log_fns.get(t)
        if fn is None:
            fn = _make_log_fn(t)
            _log_fns[t] = fn
        fn(str(message))
    except Exception:
        pass
