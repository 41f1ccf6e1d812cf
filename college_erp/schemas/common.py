# college_erp/schemas/common.py
from typing import Any, Dict, Generic, TypeVar

from pydantic import BaseModel, model_serializer

T = TypeVar("T")

ENVELOPE_OPTIONAL_KEYS = ("data", "message", "details")


class APIResponse(BaseModel, Generic[T]):
    """Envelope shared by every JSON response."""
    success: bool = True
    data: T | None = None
    message: str | None = None
    details: Any | None = None

    @model_serializer(mode="wrap")
    def _omit_absent_keys(self, handler) -> Dict[str, Any]:
        # only the envelope's own keys; nulls inside data are kept
        payload = handler(self)
        for key in ENVELOPE_OPTIONAL_KEYS:
            if payload.get(key) is None:
                payload.pop(key, None)
        return payload
