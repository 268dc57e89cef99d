"""
The interactive input loop driving one Orchestrator.
"""
from typing import Awaitable, Callable

from core.orchestrator import Orchestrator

EXIT_SENTINEL = "q"


def is_exit_command(text: str) -> bool:
    text = text.strip()
    return text == EXIT_SENTINEL or not text


async def chat_loop(read_input: Callable[[], Awaitable[str]], orchestrator: Orchestrator) -> int:
    """
    Read, dispatch, render until the user quits. Returns the number of
    completed cycles.
    """
    cycles = 0
    while True:
        text = await read_input()
        if is_exit_command(text):
            break
        await orchestrator.run(text.strip())
        cycles += 1
    return cycles
