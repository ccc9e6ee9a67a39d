from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

Role = Literal["system", "user", "assistant", "tool"]


class Message(BaseModel):
    """A single message exchanged with a provider."""

    role: Role = "user"
    content: Any = None

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: Any) -> str:
        """Accept enum-like or mixed-case role names."""
        if value is None:
            return "user"
        return str(value).strip().lower()


class Prompt(BaseModel):
    """Caller-supplied message and instructions that originate a request."""

    message: Message
    instructions: str = ""
    messages: List[Message] = Field(default_factory=list)


class Response(BaseModel):
    """Provider result bundling the produced message with the raw exchange."""

    prompt: Optional[Prompt] = None
    message: Message
    raw_response: Any = None
    raw_request: Optional[Dict[str, Any]] = None

    @property
    def embedding(self) -> Any:
        """Return the message content, which holds the vector for embed calls."""
        return self.message.content
