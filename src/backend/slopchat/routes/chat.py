from fastapi import APIRouter, Depends, HTTPException

from slopchat.config import Settings, get_settings
from slopchat.conversation.persona import SYSTEM_PROMPT
from slopchat.conversation.state import infer_state
from slopchat.llm.client import generate_reply
from slopchat.models.chat import ChatRequest, ChatResponse
from slopchat.utils.logger import get_logger
from slopchat.utils.text import preview

router = APIRouter(prefix="/api", tags=["chat"])
logger = get_logger(__name__)


@router.post("/chat", response_model=ChatResponse)
def chat(req: ChatRequest, config: Settings = Depends(get_settings)) -> ChatResponse:
    turns = [turn.model_dump() for turn in req.messages]
    logger.info("/api/chat called, turns=%d last=%s", len(turns), preview(turns[-1]["content"]))

    try:
        reply = generate_reply(SYSTEM_PROMPT, turns, config)
    except Exception:
        logger.exception("Error generating chat reply (provider=%s)", config.llm_provider)
        raise HTTPException(status_code=500, detail="Failed to process chat request")

    state = infer_state(turns, reply)
    logger.info("/api/chat completed, state=%s reply_chars=%d", state.value, len(reply))
    return ChatResponse(message=reply, state=state)
