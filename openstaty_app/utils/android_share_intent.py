from __future__ import annotations

from kivy.utils import platform

from openstaty_app.utils.logcat import log
from openstaty_app.utils.share_intake import ShareIntake, ShareIntent

_BOUND: dict[int, object] = {}


def _to_py_str(x) -> str | None:
    if x is None:
        return None
    try:
        return str(x.toString())
    except Exception:
        try:
            return str(x)
        except Exception:
            return None


def share_intent_from_java(intent) -> ShareIntent | None:
    """
    Extract action, EXTRA_STREAM and EXTRA_TEXT from an android.content.Intent.
    Returns None if `intent` is None or unreadable.
    """
    if intent is None:
        return None
    try:
        from jnius import autoclass  # type: ignore

        Intent = autoclass("android.content.Intent")
        action = _to_py_str(intent.getAction())
        stream = None
        try:
            stream = _to_py_str(intent.getParcelableExtra(Intent.EXTRA_STREAM))
        except Exception as e:
            log(f"EXTRA_STREAM unreadable: {e}")
        text = intent.getStringExtra(Intent.EXTRA_TEXT)
        return ShareIntent(
            action=action,
            stream=stream or None,
            text=str(text) if text is not None else None,
        )
    except Exception as e:
        log(f"Intent parse failed: {e}")
        return None


def read_launch_intent() -> ShareIntent | None:
    """The intent that started the activity (Android only)."""
    if platform != "android":
        return None
    try:
        from jnius import autoclass  # type: ignore

        PythonActivity = autoclass("org.kivy.android.PythonActivity")
        return share_intent_from_java(PythonActivity.mActivity.getIntent())
    except Exception as e:
        log(f"Launch intent unavailable: {e}")
        return None


def bind_share_intents(intake: ShareIntake) -> bool:
    """
    Feed the launch intent to `intake.on_launch` and route onNewIntent to
    `intake.on_redeliver`. Returns True if the new-intent listener was bound.
    """
    if platform != "android":
        return False

    intake.on_launch(read_launch_intent())

    if id(intake) in _BOUND:
        return True

    try:
        from android import activity  # type: ignore
    except Exception:
        return False

    def _on_new_intent(intent) -> None:
        intake.on_redeliver(share_intent_from_java(intent))

    try:
        activity.bind(on_new_intent=_on_new_intent)
    except Exception as e:
        log(f"Binding on_new_intent failed: {e}")
        return False
    _BOUND[id(intake)] = _on_new_intent
    return True


def unbind_share_intents(intake: ShareIntake) -> None:
    handler = _BOUND.pop(id(intake), None)
    if handler is None:
        return
    try:
        from android import activity  # type: ignore

        activity.unbind(on_new_intent=handler)
    except Exception:
        pass
