"""
Transcript widget that doubles as a TextSink for the stream renderer.
"""
from typing import Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Static


class ChatLog(VerticalScroll):
    """
    Scrolling transcript. Only the tail is repainted on flush(); once the tail
    grows past COMMIT_AT characters, its completed lines are frozen into a
    Static above it.
    """

    COMMIT_AT = 2048

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._committed: list[str] = []
        self._tail = Text()
        self._tail_widget = Static("", classes="tail")

    def compose(self) -> ComposeResult:
        yield self._tail_widget

    @property
    def plain(self) -> str:
        return "".join(self._committed) + self._tail.plain

    def write(self, text: str, style: Optional[str] = None) -> None:
        if text:
            self._tail.append(text, style=style)

    def _commit_lines(self) -> None:
        cut = self._tail.plain.rfind("\n")
        if len(self._tail) < self.COMMIT_AT or cut < 0:
            return
        # the widget boundary stands in for the newline at the cut
        done = self._tail[:cut]
        self._tail = self._tail[cut + 1:]
        self._committed.append(done.plain + "\n")
        self.mount(Static(done), before=self._tail_widget)

    def flush(self) -> None:
        self._commit_lines()
        self._tail_widget.update(self._tail.copy())
        self.scroll_end(animate=False)
