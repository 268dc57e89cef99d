"""
Two-phase rendering of a streamed reply: a <think> block for reasoning text,
followed by unmarked answer text.
"""
from typing import Optional, Protocol

from rich.console import COLOR_SYSTEMS, Console
from rich.style import Style

from core.domain import AnswerText, Delta, ReasoningText, Usage

OPEN_REASONING = "<think>\n"
CLOSE_REASONING = "\n</think>\n"

REASONING_STYLE = "rgb(200,200,200)"
USAGE_STYLE = "yellow"


class TextSink(Protocol):
    def write(self, text: str, style: Optional[str] = None) -> None: ...

    def flush(self) -> None: ...


class ConsoleSink:
    """
    TextSink on top of a rich Console.

    Text goes straight to the console file so tabs and control characters
    survive; the style only adds escape codes around it.
    """

    def __init__(self, console: Console) -> None:
        self.console = console

    def write(self, text: str, style: Optional[str] = None) -> None:
        if not text:
            return
        if style:
            color_system = COLOR_SYSTEMS.get(self.console.color_system)
            text = Style.parse(style).render(text, color_system=color_system)
        self.console.file.write(text)

    def flush(self) -> None:
        self.console.file.flush()


class StreamRenderer:
    """
    Render state machine for one response cycle.

    `in_reasoning` is True between the open marker and the first answer
    text. Every text delta is flushed immediately.
    """

    def __init__(self, sink: TextSink) -> None:
        self.sink = sink
        self.in_reasoning = False

    def reset(self) -> None:
        self.in_reasoning = False

    def announce(self, model: str) -> None:
        self.sink.write(f"🚀 {model}\n")
        self.sink.flush()

    def render(self, delta: Delta) -> None:
        if isinstance(delta, ReasoningText):
            if not self.in_reasoning:
                self.sink.write(OPEN_REASONING, REASONING_STYLE)
                self.in_reasoning = True
            self.sink.write(delta.text, REASONING_STYLE)
            self.sink.flush()
        elif isinstance(delta, AnswerText):
            if self.in_reasoning:
                self.sink.write(CLOSE_REASONING, REASONING_STYLE)
                self.in_reasoning = False
            self.sink.write(delta.text)
            self.sink.flush()

    def finish(self, usage: Usage) -> None:
        # An unterminated reasoning block stays open here.
        self.sink.write(
            f"\ntotal tokens: {usage.total_tokens} = "
            f"{usage.prompt_tokens} + {usage.completion_tokens}\n",
            USAGE_STYLE,
        )
        self.sink.flush()
