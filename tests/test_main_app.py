from __future__ import annotations

from main import OpenStatyApp
from openstaty_app.utils.share_channel import ShareChannel
from openstaty_app.utils.share_intake import ACTION_SEND, METHOD_GET_SHARED_FILE, ShareIntake, ShareIntent


class _RecordingChannel(ShareChannel):
    def __init__(self):
        super().__init__()
        self.calls = []

    def call(self, method, arguments=None):
        self.calls.append((method, self.has_messenger))
        return super().call(method, arguments)


def _app_with(channel, resolver, cache_dir):
    app = OpenStatyApp()
    app.channel = channel
    app.intake = ShareIntake(channel, resolver=resolver, cache_dir=str(cache_dir))
    return app


def test_on_start_listens_before_cold_start_pull(resolver, cache_dir):
    channel = _RecordingChannel()
    app = _app_with(channel, resolver, cache_dir)
    app.intake.on_launch(ShareIntent(action=ACTION_SEND, text="cold start"))

    app.on_start()

    assert channel.calls == [(METHOD_GET_SHARED_FILE, True)]
    assert app.shared_path.endswith("shared_chat.txt")
    assert app.intake.pending is None


def test_on_stop_detaches_messenger(resolver, cache_dir):
    channel = ShareChannel()
    app = _app_with(channel, resolver, cache_dir)
    app.on_start()
    assert channel.has_messenger

    app.on_stop()
    assert not channel.has_messenger
