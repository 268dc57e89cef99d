"""
Data models for the chat client conversation.
"""
from dataclasses import dataclass, field
from typing import Iterator, Literal

Role = Literal['user', 'assistant', 'system']


@dataclass(frozen=True)
class Turn:
    """
    A single message of the conversation history.
    """
    role: Role
    content: str

    def to_message(self) -> dict[str, str]:
        return {'role': self.role, 'content': self.content}


@dataclass
class Conversation:
    """
    Ordered, append-only history sent with every request (oldest first).
    """
    turns: list[Turn] = field(default_factory=list)

    def append(self, turn: Turn) -> None:
        self.turns.append(turn)

    def as_messages(self) -> list[dict[str, str]]:
        return [turn.to_message() for turn in self.turns]

    def __len__(self) -> int:
        return len(self.turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self.turns)
