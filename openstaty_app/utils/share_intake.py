from __future__ import annotations

import os
import shutil
import tempfile
import threading
import traceback
from dataclasses import dataclass
from typing import Any, Callable

from openstaty_app.config import FALLBACK_SHARE_FILENAME, SHARED_TEXT_FILENAME
from openstaty_app.utils.android_content import app_cache_dir, default_resolver
from openstaty_app.utils.logcat import log
from openstaty_app.utils.share_channel import MethodCall, MethodNotImplemented, ShareChannel

ACTION_SEND = "android.intent.action.SEND"

METHOD_GET_SHARED_FILE = "getSharedFile"
METHOD_ON_SHARED_FILE = "onSharedFile"


@dataclass(frozen=True)
class ShareIntent:
    """Python view of an incoming OS intent."""

    action: str | None = None
    stream: str | None = None
    text: str | None = None

    @property
    def is_send(self) -> bool:
        return self.action == ACTION_SEND


@dataclass(frozen=True)
class SharedPayload:
    local_path: str


@dataclass(frozen=True)
class MaterializeResult:
    path: str | None = None
    reason: str = ""

    @classmethod
    def success(cls, path: str) -> "MaterializeResult":
        return cls(path=str(path))

    @classmethod
    def failure(cls, reason: str) -> "MaterializeResult":
        return cls(reason=str(reason))

    @property
    def ok(self) -> bool:
        return self.path is not None


def safe_cache_filename(display_name: str) -> str:
    """
    Turn a provider display name into a filename inside the cache dir.
    Separators are replaced so the file never lands outside the cache dir.
    """
    name = (
        str(display_name or "")
        .replace("/", "_")
        .replace("\\", "_")
        .replace(":", "_")
        .strip()
    )
    if not name or set(name) == {"."}:
        return FALLBACK_SHARE_FILENAME
    return name


class ShareIntake:
    """
    Turns share intents into cached local files and serves them to the UI.

    Holds at most one pending SharedPayload. A new share replaces an unread one;
    `resolve_shared_file` returns it once and clears it.
    """

    def __init__(
        self,
        channel: ShareChannel,
        *,
        resolver: Any = None,
        cache_dir: str | Callable[[], str] | None = None,
    ) -> None:
        self.channel = channel
        self._resolver = resolver
        self._cache_dir = cache_dir
        self._pending: SharedPayload | None = None
        self._lock = threading.Lock()
        channel.set_method_call_handler(self._on_method_call)

    # -----------------------
    # Lifecycle entry points
    # -----------------------
    def on_launch(self, intent: ShareIntent | None) -> None:
        self.handle_share_intent(intent)

    def on_redeliver(self, intent: ShareIntent | None) -> None:
        self.handle_share_intent(intent)

    # -----------------------
    # State
    # -----------------------
    @property
    def pending(self) -> SharedPayload | None:
        with self._lock:
            return self._pending

    def resolve_shared_file(self) -> str | None:
        with self._lock:
            payload, self._pending = self._pending, None
        return payload.local_path if payload else None

    # -----------------------
    # Intake
    # -----------------------
    def handle_share_intent(self, intent: ShareIntent | None) -> None:
        if intent is None or not intent.is_send:
            return
        try:
            if intent.stream:
                result = self.materialize(intent.stream)
            elif intent.text is not None:
                result = self.write_shared_text(intent.text)
            else:
                return
        except Exception as e:
            log(f"Share intake failed: {e}")
            traceback.print_exc()
            return

        if not result.ok:
            log(f"No shared file produced: {result.reason}")
            return

        path = str(result.path)
        with self._lock:
            self._pending = SharedPayload(local_path=path)
        if self.channel.has_messenger:
            self.channel.invoke_method(METHOD_ON_SHARED_FILE, path)

    def materialize(self, content_ref: str) -> MaterializeResult:
        """
        Copy the bytes behind `content_ref` into the cache dir.
        Never raises; failures come back as MaterializeResult.failure.
        """
        log(f"Copying shared content -> cache: {content_ref}")
        try:
            resolver = self._get_resolver()
            try:
                src = resolver.open(content_ref)
            except OSError as e:
                return MaterializeResult.failure(f"cannot open {content_ref}: {e}")
            if src is None:
                return MaterializeResult.failure(f"cannot open {content_ref}")

            with src:
                name = self._display_name(resolver, content_ref)
                cache_dir = self._get_cache_dir()
                out_path = os.path.join(cache_dir, name)
                # out_path is only replaced once the whole stream has been copied.
                tmp = tempfile.NamedTemporaryFile(dir=cache_dir, prefix=".share-", delete=False)
                try:
                    with tmp:
                        shutil.copyfileobj(src, tmp)
                    os.replace(tmp.name, out_path)
                finally:
                    if os.path.exists(tmp.name):
                        os.unlink(tmp.name)
        except Exception as e:
            traceback.print_exc()
            return MaterializeResult.failure(f"copy failed for {content_ref}: {e}")

        path = os.path.abspath(out_path)
        log(f"Copied file path: {path}")
        return MaterializeResult.success(path)

    def write_shared_text(self, text: str) -> MaterializeResult:
        try:
            out_path = os.path.join(self._get_cache_dir(), SHARED_TEXT_FILENAME)
            # newline="" keeps the text byte-for-byte.
            with open(out_path, "w", encoding="utf-8", newline="") as f:
                f.write(str(text))
        except Exception as e:
            traceback.print_exc()
            return MaterializeResult.failure(f"text write failed: {e}")
        return MaterializeResult.success(os.path.abspath(out_path))

    # -----------------------
    # Internals
    # -----------------------
    def _on_method_call(self, call: MethodCall) -> Any:
        if call.method == METHOD_GET_SHARED_FILE:
            return self.resolve_shared_file()
        raise MethodNotImplemented(call.method)

    def _display_name(self, resolver: Any, content_ref: str) -> str:
        try:
            name = resolver.display_name(content_ref)
        except Exception as e:
            log(f"Display name lookup failed: {e}")
            name = ""
        return safe_cache_filename(name)

    def _get_resolver(self) -> Any:
        if self._resolver is None:
            self._resolver = default_resolver()
        return self._resolver

    def _get_cache_dir(self) -> str:
        d = self._cache_dir
        if callable(d):
            d = d()
        d = str(d or app_cache_dir())
        os.makedirs(d, exist_ok=True)
        return d
