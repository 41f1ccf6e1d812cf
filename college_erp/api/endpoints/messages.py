# college_erp/api/endpoints/messages.py
import logging
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from college_erp.core.security import get_current_staff, get_current_user
from college_erp.db.session import get_db
from college_erp.models.user import User
from college_erp.realtime.gateway import RealtimeGateway, get_gateway
from college_erp.schemas.common import APIResponse
from college_erp.schemas.message import MessageCreate, MessagePublic
from college_erp.services import message_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["messages"])


@router.get("/my", response_model=APIResponse[List[MessagePublic]])
def list_my_messages(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
):
    """
    Direct messages for the caller plus every broadcast, newest first.
    """
    messages = message_service.list_received_messages(
        db, user_id=current_user.id, skip=skip, limit=limit
    )
    return APIResponse[List[MessagePublic]](
        data=[MessagePublic.model_validate(m) for m in messages]
    )


@router.post("", response_model=APIResponse[MessagePublic], status_code=status.HTTP_201_CREATED)
def create_message(
    obj_in: MessageCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff),
    gateway: Optional[RealtimeGateway] = Depends(get_gateway),
):
    message = message_service.create_message(db, sender_id=current_user.id, obj_in=obj_in)

    if gateway is not None:
        payload = message_service.build_realtime_payload(message)
        background_tasks.add_task(gateway.publish_message, payload, message.receiver_id)
    else:
        logger.warning(f"Realtime gateway unavailable; message {message.id} stored without push")

    return APIResponse[MessagePublic](
        data=MessagePublic.model_validate(message),
        message="Message sent successfully.",
    )


@router.patch("/{message_id}/read", response_model=APIResponse[MessagePublic])
def mark_message_read(
    message_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    message = message_service.mark_message_as_read(
        db, message_id=message_id, user_id=current_user.id
    )
    return APIResponse[MessagePublic](
        data=MessagePublic.model_validate(message),
        message="Message marked as read.",
    )
