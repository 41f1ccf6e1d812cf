# college_erp/schemas/message.py
from typing import Literal

from pydantic import BaseModel, Field
from datetime import datetime

MessageType = Literal["Direct", "Broadcast"]
MessagePriority = Literal["Normal", "Urgent", "Critical"]


class MessageCreate(BaseModel):
    receiver_id: str | None = None  # required for Direct, ignored for Broadcast
    subject: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    type: MessageType
    priority: MessagePriority = "Normal"


class SenderSummary(BaseModel):
    id: str
    name: str
    role: str | None = None

    model_config = {"from_attributes": True}


class MessagePublic(BaseModel):
    id: int
    sender_id: str | None = None
    receiver_id: str | None = None
    subject: str
    content: str
    timestamp: datetime
    priority: MessagePriority
    type: MessageType
    is_read: bool = False
    created_at: datetime | None = None

    sender: SenderSummary | None = None

    model_config = {"from_attributes": True}
