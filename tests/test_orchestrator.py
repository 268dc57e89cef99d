import pytest

from conftest import FakeTransport, answer, reasoning, sse, usage
from core.domain import Usage
from core.errors import StreamEstablishError
from core.orchestrator import Orchestrator
from core.renderer import CLOSE_REASONING, OPEN_REASONING
from models import Conversation, Turn


@pytest.mark.asyncio
async def test_reasoning_then_answer_end_to_end(config, console_output):
    sink, buf = console_output
    transport = FakeTransport([
        reasoning("Thinking"),
        reasoning("..."),
        answer("Hi!"),
        usage(12, 5, 7),
        b"data: [DONE]",
    ])
    orch = Orchestrator(config, transport, sink)

    result = await orch.run("Hello")

    assert result == Usage(12, 5, 7)
    assert buf.getvalue() == (
        f"🚀 {config.model}\n"
        + OPEN_REASONING + "Thinking..." + CLOSE_REASONING + "Hi!"
        + "\ntotal tokens: 12 = 5 + 7\n"
    )
    assert transport.payloads == [{
        "model": config.model,
        "stream": True,
        "messages": [{"role": "user", "content": "Hello"}],
    }]


@pytest.mark.asyncio
async def test_malformed_fragment_between_answers(config, recording_sink):
    transport = FakeTransport([answer("A"), b'data: {"choices": [', answer("B")])
    orch = Orchestrator(config, transport, recording_sink)

    result = await orch.run("x")

    rendered = recording_sink.text
    assert recording_sink.writes[1:3] == [("A", None), ("B", None)]
    assert result == Usage.zero()
    assert rendered.endswith("\ntotal tokens: 0 = 0 + 0\n")


@pytest.mark.asyncio
async def test_usage_reported_inline_with_deltas(config, recording_sink):
    transport = FakeTransport([
        sse({"choices": [{"delta": {"content": "a"}}], "usage": {"total_tokens": 6, "prompt_tokens": 5, "completion_tokens": 1}}),
        sse({"choices": [{"delta": {"content": "b"}}], "usage": {"total_tokens": 7, "prompt_tokens": 5, "completion_tokens": 2}}),
    ])
    orch = Orchestrator(config, transport, recording_sink)
    assert await orch.run("x") == Usage(7, 5, 2)


@pytest.mark.asyncio
async def test_history_keeps_only_user_turns(config, recording_sink):
    transport = FakeTransport([answer("one")], [answer("two")])
    orch = Orchestrator(config, transport, recording_sink)

    await orch.run("first")
    await orch.run("second")

    assert list(orch.conversation) == [Turn("user", "first"), Turn("user", "second")]
    assert transport.payloads[1]["messages"] == [
        {"role": "user", "content": "first"},
        {"role": "user", "content": "second"},
    ]


@pytest.mark.asyncio
async def test_existing_conversation_is_sent_first(config, recording_sink):
    history = Conversation([Turn("system", "be brief")])
    transport = FakeTransport([answer("ok")])
    orch = Orchestrator(config, transport, recording_sink, conversation=history)

    await orch.run("hi")

    assert transport.payloads[0]["messages"][0] == {"role": "system", "content": "be brief"}
    assert len(history) == 2


@pytest.mark.asyncio
async def test_reasoning_state_resets_between_cycles(config, recording_sink):
    transport = FakeTransport([reasoning("r")], [answer("a")])
    orch = Orchestrator(config, transport, recording_sink)

    await orch.run("1")
    await orch.run("2")

    # the first reply never closed its block; the second must not close it either
    assert recording_sink.text.count(OPEN_REASONING) == 1
    assert CLOSE_REASONING not in recording_sink.text


class _FailingTransport:
    async def stream_frames(self, payload):
        raise StreamEstablishError("Failed to send request. Check your Internet connection")
        yield b""


@pytest.mark.asyncio
async def test_establish_failure_propagates(config, recording_sink):
    orch = Orchestrator(config, _FailingTransport(), recording_sink)
    with pytest.raises(StreamEstablishError):
        await orch.run("hello")
