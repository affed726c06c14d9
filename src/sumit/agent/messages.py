"""Conversation messages exchanged with the model."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class Role(str, Enum):
    """Author of a message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    DEVELOPER = "developer"


@dataclass(frozen=True)
class Message:
    """A single conversation turn."""

    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class MessageLog:
    """Append-only, ordered conversation history for one session."""

    def __init__(self) -> None:
        self._messages: list[Message] = []

    def append(self, message: Message) -> Message:
        """Add a message to the end of the log."""
        self._messages.append(message)
        return message

    def add(self, role: Role, content: str) -> Message:
        """Build and append a message."""
        return self.append(Message(role=role, content=content))

    def to_request(self, developer_role: str = Role.DEVELOPER.value) -> list[dict[str, str]]:
        """Messages in the shape the chat completions API expects.

        Developer messages are sent under ``developer_role`` for engines that
        do not accept the ``developer`` role.
        """
        request = []
        for message in self._messages:
            entry = message.to_dict()
            if message.role is Role.DEVELOPER:
                entry["role"] = developer_role
            request.append(entry)
        return request

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))

    def __len__(self) -> int:
        return len(self._messages)

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]
