from fastapi import APIRouter, Depends

from slopchat.config import Settings, get_settings
from slopchat.llm.client import get_llm_health
from slopchat.notify.fanout import build_channels

router = APIRouter(prefix="", tags=["health"])


@router.get("/health")
def health_check(config: Settings = Depends(get_settings)):
    channels = {channel.name: channel.is_configured() for channel in build_channels(config)}
    return {"status": "ok", "llm": get_llm_health(config), "channels": channels}
