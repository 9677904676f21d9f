from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from slopchat.config import Settings, get_settings
from slopchat.models.lead import LeadRecord, LeadResponse
from slopchat.notify.fanout import LeadDispatcher, build_lead_dispatcher
from slopchat.utils.logger import get_logger

router = APIRouter(prefix="/api", tags=["leads"])
logger = get_logger(__name__)

DEFAULT_ACKNOWLEDGMENT = "Thank you! Our team will be in touch within 24 hours."


def get_lead_dispatcher(config: Settings = Depends(get_settings)) -> LeadDispatcher:
    return build_lead_dispatcher(config)


@router.post("/lead", response_model=LeadResponse)
def submit_lead(
    lead: LeadRecord,
    config: Settings = Depends(get_settings),
    dispatcher: LeadDispatcher = Depends(get_lead_dispatcher),
) -> LeadResponse:
    logger.info(
        "Lead captured: name=%s email=%s event_type=%s timestamp=%s",
        lead.name,
        lead.email,
        lead.event_type,
        datetime.now(timezone.utc).isoformat(),
    )

    try:
        report = dispatcher.dispatch(lead)
    except Exception:
        logger.exception(
            f"Error while dispatching lead: name={lead.name}, email={lead.email}"
        )
        raise HTTPException(status_code=500, detail="Failed to submit lead")

    if report.priority or report.reference:
        logger.info(
            "Lead email=%s stored as record=%s priority=%s",
            lead.email,
            report.reference,
            report.priority,
        )

    if not report.delivered and config.lead_require_delivery:
        raise HTTPException(status_code=500, detail="Failed to submit lead")

    return LeadResponse(
        success=True,
        message=report.acknowledgment or DEFAULT_ACKNOWLEDGMENT,
    )
