"""
Request models for the chat relay and title generation endpoints.
"""
from pydantic import BaseModel, model_validator
from typing import List, Optional, Literal

class UIMessagePart(BaseModel):
    model_config = {"extra": "allow"}

    type: str
    text: Optional[str] = None

class UIMessage(BaseModel):
    """A chat message as sent by the dashboard: plain ``content`` or a list of ``parts``."""
    model_config = {"extra": "allow"}

    id: Optional[str] = None
    role: Literal["user", "assistant", "system"]
    content: Optional[str] = None
    parts: Optional[List[UIMessagePart]] = None

    @model_validator(mode="after")
    def _require_text_source(self):
        if self.content is None and self.parts is None:
            raise ValueError("message needs either 'content' or 'parts'")
        return self

    @property
    def text(self) -> str:
        """Text of the message; text parts are concatenated in order."""
        if self.parts is not None:
            return "".join(p.text or "" for p in self.parts if p.type == "text")
        return self.content or ""

class ConversationRequest(BaseModel):
    messages: List[UIMessage]
