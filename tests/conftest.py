import copy
import io
import json

import pytest
from rich.console import Console

from core.config import ClientConfig
from core.renderer import ConsoleSink


def sse(obj) -> bytes:
    return b"data: " + json.dumps(obj).encode("utf-8")


def reasoning(text):
    return sse({"choices": [{"delta": {"content": None, "reasoning_content": text}}]})


def answer(text):
    return sse({"choices": [{"delta": {"content": text, "reasoning_content": None}}]})


def usage(total, prompt, completion):
    return sse({
        "choices": [],
        "usage": {"total_tokens": total, "prompt_tokens": prompt, "completion_tokens": completion},
    })


class FakeTransport:
    """Replays one scripted list of frames per request and records payloads."""

    def __init__(self, *streams):
        self.streams = list(streams)
        self.payloads = []

    async def stream_frames(self, payload):
        self.payloads.append(copy.deepcopy(payload))
        for frame in self.streams.pop(0):
            yield frame


class RecordingSink:
    def __init__(self):
        self.writes = []
        self.flushes = 0

    def write(self, text, style=None):
        self.writes.append((text, style))

    def flush(self):
        self.flushes += 1

    @property
    def text(self):
        return "".join(t for t, _ in self.writes)


@pytest.fixture
def config():
    return ClientConfig(api_key="sk-test", model="deepseek-ai/DeepSeek-R1", url="https://llm.test/v1/chat/completions")


@pytest.fixture
def console_output():
    buf = io.StringIO()
    console = Console(file=buf, color_system=None, force_terminal=False, width=200)
    return ConsoleSink(console), buf


@pytest.fixture
def recording_sink():
    return RecordingSink()
