"""
Stream-level domain types shared by the decoder, the renderer and the orchestrator.
"""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Usage:
    """Cumulative token counts as reported by the server."""
    total_tokens: int = 0
    prompt_tokens: int = 0
    completion_tokens: int = 0

    @classmethod
    def zero(cls) -> 'Usage':
        return cls()


@dataclass(frozen=True)
class AnswerText:
    text: str


@dataclass(frozen=True)
class ReasoningText:
    text: str


@dataclass(frozen=True)
class EmptyDelta:
    """A fragment with neither answer nor reasoning text (heartbeat, role-only)."""


EMPTY = EmptyDelta()

Delta = Union[AnswerText, ReasoningText, EmptyDelta]


@dataclass(frozen=True)
class StreamFragment:
    """
    One decoded unit of the server stream.

    `deltas` holds one classified delta per wire choice, in wire order.
    """
    deltas: tuple[Delta, ...] = ()
    usage: Optional[Usage] = None
