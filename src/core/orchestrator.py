import logging
from contextlib import aclosing
from typing import Any, AsyncGenerator, Optional, Protocol

from core.config import ClientConfig
from core.domain import Usage
from core.renderer import StreamRenderer, TextSink
from core.sse_adapter import adapt_fragments, classify
from core.usage import UsageAccumulator
from models import Conversation, Turn

logger = logging.getLogger(__name__)


class FrameSource(Protocol):
    def stream_frames(self, payload: dict[str, Any]) -> AsyncGenerator[bytes, None]: ...


class Orchestrator:
    def __init__(
        self,
        config: ClientConfig,
        transport: FrameSource,
        sink: TextSink,
        conversation: Optional[Conversation] = None,
    ):
        self.config = config
        self.transport = transport
        self.sink = sink
        self.conversation = conversation if conversation is not None else Conversation()

    def build_payload(self) -> dict[str, Any]:
        return {
            'model': self.config.model,
            'stream': True,
            'messages': self.conversation.as_messages(),
        }

    async def run(self, user_input: str) -> Usage:
        """
        One request/response cycle.

        Only the user turn is added to the conversation; the streamed reply
        is rendered but not kept in the history.
        """
        self.conversation.append(Turn(role='user', content=user_input))
        payload = self.build_payload()

        renderer = StreamRenderer(self.sink)
        usage = UsageAccumulator()
        renderer.announce(self.config.model)

        logger.info("dispatching turn %d", len(self.conversation))
        async with aclosing(self.transport.stream_frames(payload)) as frames:
            async for fragment in adapt_fragments(frames):
                usage.observe(fragment)
                renderer.render(classify(fragment))

        renderer.finish(usage.snapshot)
        logger.info("cycle finished: %s", usage.snapshot)
        return usage.snapshot
