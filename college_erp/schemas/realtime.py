# college_erp/schemas/realtime.py
from typing import Literal

from pydantic import BaseModel

RealtimeMessageType = Literal["Broadcast", "Direct", "SystemInfo", "SystemSuccess", "SystemError"]


class RealtimeMessagePayload(BaseModel):
    """Body of every ``receive:message`` event."""
    id: str  # message id, or a generated id for system notices
    sender: str | None = None
    subject: str | None = None
    content: str
    timestamp: str  # ISO 8601
    priority: Literal["Normal", "Urgent", "Critical"] = "Normal"
    type: RealtimeMessageType
    title: str | None = None
