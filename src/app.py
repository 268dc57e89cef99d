"""
Streaming reasoning chat CLI
"""

import argparse
import asyncio
import os
import sys
from typing import Optional

from dotenv import load_dotenv
from prompt_toolkit import PromptSession
from rich.console import Console
from textual import work
from textual.app import App, ComposeResult

from core.config import MODEL_ALIASES, ClientConfig, load_config, resolve_model
from core.errors import ChatClientError
from core.logger import setup_logging
from core.orchestrator import FrameSource, Orchestrator
from core.renderer import ConsoleSink
from core.session import chat_loop, is_exit_command
from core.transport import ChatTransport
from widgets import ChatLog, InputArea

PROMPT = "☁️ : "
EXIT_INTERRUPTED = 130


class ChatApp(App):
    CSS = """
#chat_log {
    height: 1fr;
    padding: 0 1;
}
    """

    def __init__(self, config: ClientConfig, transport: Optional[FrameSource] = None):
        """Initialize the chat application; a transport is created on mount unless given."""
        super().__init__()
        self.config = config
        self.transport = transport
        self._owns_transport = transport is None
        self.orchestrator: Optional[Orchestrator] = None

    def compose(self) -> ComposeResult:
        yield ChatLog(id="chat_log")
        yield InputArea(id="input_text", placeholder="how can i help you (q to quit)")

    async def on_mount(self) -> None:
        if self.transport is None:
            self.transport = ChatTransport(self.config)

        chat_log = self.query_one("#chat_log", ChatLog)
        self.orchestrator = Orchestrator(self.config, self.transport, chat_log)

        chat_log.write("Welcome to the reasoning chat!\n", "bold green")
        chat_log.write(f"model: {self.config.model}\n", "dim")
        chat_log.flush()
        self.query_one("#input_text", InputArea).focus()

    async def on_unmount(self) -> None:
        if self._owns_transport and isinstance(self.transport, ChatTransport):
            await self.transport.aclose()

    async def on_input_area_submit(self, message: InputArea.Submit) -> None:
        """
        Quit on the exit command, otherwise echo the input and start a cycle.
        """
        text = message.value.strip()
        if is_exit_command(text):
            self.exit()
            return

        chat_log = self.query_one("#chat_log", ChatLog)
        chat_log.write(f"\n{PROMPT}{text}\n", "dim")
        chat_log.flush()

        self._set_busy(True)
        self.run_infer(text)

    def _set_busy(self, busy: bool) -> None:
        input_text = self.query_one("#input_text", InputArea)
        input_text.disabled = busy
        if not busy:
            input_text.focus()

    @work(exclusive=True, group='infer')
    async def run_infer(self, user_input: str) -> None:
        """
        Run one request/response cycle. A transport failure ends the app.
        """
        try:
            await self.orchestrator.run(user_input)
        except ChatClientError as exc:
            self.exit(return_code=1, message=str(exc))
            return
        self._set_busy(False)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    aliases = ", ".join(f"{k}: {v}" for k, v in MODEL_ALIASES.items())
    parser = argparse.ArgumentParser(description="Chat with a streaming reasoning model.")
    parser.add_argument(
        "-m", "--multi-lines", action="store_true",
        help="Support multiple lines input (Esc+Enter submits)",
    )
    parser.add_argument("--model", default=None, help=f"Model alias ({aliases}). ds-8 by default")
    parser.add_argument("--tui", action="store_true", help="Run the full-screen interface")
    parser.add_argument("--log-level", default=None, help="Overrides LOG_LEVEL")
    return parser.parse_args(argv)


async def _read_line(session: PromptSession, multi_lines: bool) -> str:
    try:
        return await session.prompt_async(PROMPT, multiline=multi_lines)
    except EOFError:
        return ""


async def run_terminal(config: ClientConfig, console: Console) -> int:
    session = PromptSession()
    async with ChatTransport(config) as transport:
        orchestrator = Orchestrator(config, transport, ConsoleSink(console))
        return await chat_loop(lambda: _read_line(session, config.multi_lines), orchestrator)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    load_dotenv()
    setup_logging(
        args.log_level or os.getenv("LOG_LEVEL", "WARNING"),
        log_file=os.getenv("LOG_FILE"),
        console=not args.tui,
    )

    model, known = resolve_model(args.model)
    try:
        config = load_config(model, multi_lines=args.multi_lines)
    except ChatClientError as exc:
        sys.exit(str(exc))

    console = Console()
    if known:
        console.print(model, highlight=False)
    else:
        console.print(f"Unknown model. Using {model} by default", highlight=False)

    if args.tui:
        app = ChatApp(config)
        app.run()
        sys.exit(app.return_code or 0)

    try:
        asyncio.run(run_terminal(config, console))
    except KeyboardInterrupt:
        print("Terminated with CTRL-C", file=sys.stderr)
        sys.exit(EXIT_INTERRUPTED)
    except ChatClientError as exc:
        sys.exit(str(exc))


if __name__ == "__main__":
    main()
