"""
Server-sent chat-completion frames -> StreamFragment / Delta.
"""
import logging
from typing import AsyncIterator, Optional

from pydantic import BaseModel, Field, ValidationError

from core.domain import EMPTY, AnswerText, Delta, ReasoningText, StreamFragment, Usage

logger = logging.getLogger(__name__)

DATA_PREFIX = b"data: "
DONE_PAYLOAD = b"[DONE]"


class _WireDelta(BaseModel):
    content: Optional[str] = None
    reasoning_content: Optional[str] = None


class _WireChoice(BaseModel):
    delta: _WireDelta = Field(default_factory=_WireDelta)


class _WireUsage(BaseModel):
    total_tokens: int = Field(default=0, ge=0)
    prompt_tokens: int = Field(default=0, ge=0)
    completion_tokens: int = Field(default=0, ge=0)


class _WireChunk(BaseModel):
    choices: list[_WireChoice] = Field(default_factory=list)
    usage: Optional[_WireUsage] = None


def classify_delta(content: Optional[str], reasoning_content: Optional[str]) -> Delta:
    """
    Answer text wins over reasoning text; an empty answer string still counts.
    """
    if content is not None:
        return AnswerText(content)
    if reasoning_content is not None:
        return ReasoningText(reasoning_content)
    return EMPTY


def classify(fragment: StreamFragment) -> Delta:
    """Only the first delta of a fragment is meaningful."""
    if not fragment.deltas:
        return EMPTY
    return fragment.deltas[0]


def strip_event_prefix(frame: bytes) -> Optional[bytes]:
    if not frame.startswith(DATA_PREFIX):
        return None
    return frame[len(DATA_PREFIX):]


def _to_fragment(chunk: _WireChunk) -> StreamFragment:
    deltas = tuple(
        classify_delta(ch.delta.content, ch.delta.reasoning_content)
        for ch in chunk.choices
    )
    usage = None
    if chunk.usage is not None:
        usage = Usage(
            total_tokens=chunk.usage.total_tokens,
            prompt_tokens=chunk.usage.prompt_tokens,
            completion_tokens=chunk.usage.completion_tokens,
        )
    return StreamFragment(deltas=deltas, usage=usage)


def decode_fragment(payload: bytes) -> Optional[StreamFragment]:
    """
    Parse one event payload. Anything that does not match the chunk schema
    yields None instead of an error.
    """
    try:
        chunk = _WireChunk.model_validate_json(payload)
    except ValidationError as exc:
        logger.debug("skipping undecodable payload %r: %s", payload[:80], exc.errors()[0]['type'])
        return None
    return _to_fragment(chunk)


async def adapt_fragments(frames: AsyncIterator[bytes]) -> AsyncIterator[StreamFragment]:
    """
    Convert raw SSE frames into StreamFragments, strictly in arrival order.

    Blank frames, non-data frames and undecodable payloads are skipped.
    The [DONE] terminator ends the stream.
    """
    async for frame in frames:
        frame = frame.strip()
        if not frame:
            continue

        payload = strip_event_prefix(frame)
        if payload is None:
            logger.debug("skipping non-data frame %r", frame[:80])
            continue

        if payload == DONE_PAYLOAD:
            break

        fragment = decode_fragment(payload)
        if fragment is not None:
            yield fragment
