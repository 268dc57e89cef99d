"""
Custom input widgets for the chat TUI.
"""
from textual import on
from textual.widgets import Input
from textual.message import Message


class InputArea(Input):
    class Submit(Message, bubble=True):
        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    @on(Input.Submitted)
    def _forward_submit(self, event: Input.Submitted) -> None:
        event.stop()
        self.post_message(self.Submit(event.value))
        self.value = ""
