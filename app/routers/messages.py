# =============================================================================
# app/routers/messages.py - Messaging Endpoints
# =============================================================================
# Buyers and sellers exchange messages about a listing.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel

from core.models.message import ConversationQuery, Message, MessageCreate
from core.services.message_service import MessageService

router = APIRouter()


class MessageListResponse(BaseModel):
    success: bool = True
    messages: list[Message]


class MessageSentResponse(BaseModel):
    success: bool = True
    message: Message


@router.get("", response_model=MessageListResponse)
async def get_messages(
    listing_id: Annotated[str, Query(min_length=1, description="Listing UUID")],
    buyer_email: Annotated[str | None, Query(description="With seller_email, narrows to one conversation")] = None,
    seller_email: Annotated[str | None, Query(description="With buyer_email, narrows to one conversation")] = None,
):
    """
    Get the messages of a listing, oldest first.

    Passing both emails returns only the conversation between them, in
    either direction.
    """
    messages = MessageService.get_messages(
        ConversationQuery(
            listing_id=listing_id,
            buyer_email=buyer_email,
            seller_email=seller_email,
        )
    )
    return {"success": True, "messages": messages}


@router.post("", response_model=MessageSentResponse, status_code=201)
async def send_message(request: MessageCreate):
    """
    Send a message about a listing.

    The listing must exist and seller_email must be its seller.
    """
    message = MessageService.send_message(request)
    return {"success": True, "message": message}
