"""
Fake chat models and SSE parsing shared by the tests.
"""
import json
from typing import Any, List

from langchain_core.language_models import BaseChatModel
from langchain_core.language_models.fake_chat_models import FakeListChatModel, GenericFakeChatModel
from langchain_core.messages import AIMessage, BaseMessage
from langchain_core.outputs import ChatGeneration, ChatResult
from pydantic import Field


class FailingChatModel(BaseChatModel):
    """Chat model whose provider call always fails."""
    error_message: str = "provider unavailable"

    @property
    def _llm_type(self) -> str:
        return "failing"

    def _generate(self, messages, stop=None, run_manager=None, **kwargs) -> ChatResult:
        raise RuntimeError(self.error_message)


class RecordingChatModel(BaseChatModel):
    """Chat model that answers with a fixed reply and remembers every prompt."""
    reply: str = "recorded reply"
    received: List[List[BaseMessage]] = Field(default_factory=list)

    @property
    def _llm_type(self) -> str:
        return "recording"

    def _generate(self, messages, stop=None, run_manager=None, **kwargs) -> ChatResult:
        self.received.append(list(messages))
        return ChatResult(generations=[ChatGeneration(message=AIMessage(content=self.reply))])


def streaming_model(text: str) -> GenericFakeChatModel:
    """A fake model that streams ``text`` word by word."""
    return GenericFakeChatModel(messages=iter([AIMessage(content=text)]))


def failing_midstream_model(text: str, fail_at: int) -> FakeListChatModel:
    """A fake model that streams ``text`` one character at a time and fails at chunk ``fail_at``."""
    return FakeListChatModel(responses=[text], error_on_chunk_number=fail_at)


def title_model(*titles: str) -> FakeListChatModel:
    return FakeListChatModel(responses=list(titles))


def parse_sse(body: str) -> List[Any]:
    """Decode an SSE body into its data payloads; ``[DONE]`` is kept as a string."""
    events = []
    for frame in body.split("\n\n"):
        frame = frame.strip()
        if not frame:
            continue
        assert frame.startswith("data: "), frame
        data = frame[len("data: "):]
        events.append(data if data == "[DONE]" else json.loads(data))
    return events


def user(content: str, id: str = None) -> dict:
    msg = {"role": "user", "content": content}
    if id:
        msg["id"] = id
    return msg


def assistant(content: str) -> dict:
    return {"role": "assistant", "content": content}
