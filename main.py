from __future__ import annotations

from typing import Any

from kivy.app import App
from kivy.clock import Clock
from kivy.properties import StringProperty
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.label import Label
from kivy.utils import platform

from openstaty_app.utils.android_share_intent import bind_share_intents, unbind_share_intents
from openstaty_app.utils.logcat import log
from openstaty_app.utils.share_channel import ShareChannel
from openstaty_app.utils.share_intake import METHOD_GET_SHARED_FILE, METHOD_ON_SHARED_FILE, ShareIntake


class OpenStatyApp(App):
    title = "OpenStaty"
    shared_path = StringProperty("")

    def build(self):
        try:
            if platform == "android":
                from kivy.core.window import Window

                Window.softinput_mode = "below_target"
        except Exception:
            pass

        self.channel = ShareChannel()
        self.intake = ShareIntake(self.channel)

        root = BoxLayout(orientation="vertical", padding=24)
        label = Label(text="Share a chat export to OpenStaty", halign="center")
        self.bind(shared_path=lambda _app, p: setattr(label, "text", p or label.text))
        root.add_widget(label)
        return root

    def on_start(self):
        # Attach before pulling so an onNewIntent racing the cold-start pull is
        # still pushed. A path may then arrive twice; _show_shared is idempotent.
        self.channel.attach_messenger(self._on_channel_message)
        bind_share_intents(self.intake)
        result = self.channel.call(METHOD_GET_SHARED_FILE)
        if result.ok and result.value:
            self._show_shared(result.value)

    def on_stop(self):
        self.channel.detach_messenger()
        unbind_share_intents(self.intake)

    def _on_channel_message(self, method: str, arguments: Any) -> None:
        if method != METHOD_ON_SHARED_FILE:
            return
        # onNewIntent arrives on the Java UI thread; hop to the Kivy loop.
        Clock.schedule_once(lambda *_: self._show_shared(arguments), 0)

    def _show_shared(self, path: Any) -> None:
        log(f"Shared file ready: {path}")
        self.shared_path = str(path or "")


if __name__ == "__main__":
    OpenStatyApp().run()
