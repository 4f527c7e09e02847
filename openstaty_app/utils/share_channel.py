from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable

from openstaty_app.config import share_channel_name
from openstaty_app.utils.logcat import log


class MethodNotImplemented(Exception):
    """Raised by a method-call handler for method names it does not serve."""


@dataclass
class MethodCall:
    method: str
    arguments: Any = None


@dataclass
class MethodResult:
    """
    Reply to a UI -> shim call.

    kind is one of "success", "error", "not_implemented".
    """

    kind: str
    value: Any = None
    error_code: str = ""
    error_message: str = ""

    @classmethod
    def success(cls, value: Any = None) -> "MethodResult":
        return cls(kind="success", value=value)

    @classmethod
    def error(cls, code: str, message: str = "") -> "MethodResult":
        return cls(kind="error", error_code=str(code), error_message=str(message))

    @classmethod
    def not_implemented(cls) -> "MethodResult":
        return cls(kind="not_implemented")

    @property
    def ok(self) -> bool:
        return self.kind == "success"


Handler = Callable[[MethodCall], Any]
Messenger = Callable[[str, Any], None]


@dataclass
class ShareChannel:
    """
    Named, bidirectional method-call channel between the native shim and the UI.

    - UI -> shim: `call(method, arguments)` routes to the registered handler.
    - shim -> UI: `invoke_method(method, arguments)` goes to the attached
      messenger, if any. Without a messenger nothing is sent.
    """

    name: str = field(default_factory=share_channel_name)
    _handler: Handler | None = field(default=None, repr=False)
    _messenger: Messenger | None = field(default=None, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def set_method_call_handler(self, handler: Handler | None) -> None:
        self._handler = handler

    def attach_messenger(self, messenger: Messenger) -> None:
        with self._lock:
            self._messenger = messenger

    def detach_messenger(self) -> None:
        with self._lock:
            self._messenger = None

    @property
    def has_messenger(self) -> bool:
        return self._messenger is not None

    def call(self, method: str, arguments: Any = None) -> MethodResult:
        handler = self._handler
        if handler is None:
            return MethodResult.not_implemented()
        try:
            return MethodResult.success(handler(MethodCall(str(method), arguments)))
        except MethodNotImplemented:
            return MethodResult.not_implemented()
        except Exception as e:
            log(f"{self.name}: handler for {method!r} failed: {e}")
            return MethodResult.error("handler_failed", str(e))

    def invoke_method(self, method: str, arguments: Any = None) -> bool:
        """Fire-and-forget push. Returns True if a messenger received it."""
        with self._lock:
            messenger = self._messenger
        if messenger is None:
            return False
        try:
            messenger(str(method), arguments)
        except Exception as e:
            log(f"{self.name}: push {method!r} failed: {e}")
            return False
        return True
