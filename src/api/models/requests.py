"""Pydantic models for inbound chat events."""

from pydantic import BaseModel, ConfigDict, Field


class ChatUser(BaseModel):
    """Sender of a chat message."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    display_name: str = Field("", alias="displayName")
    type: str = "HUMAN"  # "HUMAN" or "BOT"


class ChatAnnotation(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str


class ChatMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    text: str = ""
    argument_text: str | None = Field(None, alias="argumentText")
    annotations: list[ChatAnnotation] = []


class ChatEvent(BaseModel):
    """Chat platform event (MESSAGE, ADDED_TO_SPACE, ...)."""

    model_config = ConfigDict(extra="ignore")

    type: str = "MESSAGE"
    user: ChatUser
    message: ChatMessage | None = None

    @property
    def is_bot(self) -> bool:
        return self.user.type == "BOT"

    @property
    def is_mentioned(self) -> bool:
        if not self.message:
            return False
        return any(a.type == "USER_MENTION" for a in self.message.annotations)

    @property
    def command_text(self) -> str:
        """Message text without the bot mention."""
        if not self.message:
            return ""
        if self.message.argument_text is not None:
            return self.message.argument_text
        return self.message.text
