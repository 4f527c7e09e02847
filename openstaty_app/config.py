from __future__ import annotations

import os


def _load_dotenv_if_present() -> None:
    """
    Load environment variables from a local `.env` file (dev convenience).

    Device builds never ship a `.env`; this does nothing there.
    """
    try:
        from dotenv import load_dotenv  # type: ignore

        # Do not override existing environment variables.
        load_dotenv(override=False)
    except Exception:
        return


_load_dotenv_if_present()


DEFAULT_SHARE_CHANNEL = "tech.sallytion.openstaty/share"
DEFAULT_LOG_TAG = "OpenStatyShare"

# Fixed cache filenames.
SHARED_TEXT_FILENAME = "shared_chat.txt"
FALLBACK_SHARE_FILENAME = "shared_file"


def share_channel_name() -> str:
    return (os.environ.get("OPENSTATY_SHARE_CHANNEL") or "").strip() or DEFAULT_SHARE_CHANNEL


def log_tag() -> str:
    return (os.environ.get("OPENSTATY_LOG_TAG") or "").strip() or DEFAULT_LOG_TAG


def cache_dir_override() -> str:
    """
    Desktop/dev override for the share cache directory.
    Ignored on Android, where the app's private cache dir is always used.
    """
    return (os.environ.get("OPENSTATY_CACHE_DIR") or "").strip()
