from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LeadRecord(BaseModel):
    name: str
    email: str  # free text, deliverability is the team's problem
    phone: Optional[str] = None
    event_type: Optional[str] = Field(None, alias="eventType")
    theme: Optional[str] = None
    date: Optional[str] = None
    guest_count: Optional[str] = Field(None, alias="guestCount")
    location: Optional[str] = None
    budget: Optional[str] = None
    conversation_summary: Optional[str] = Field(None, alias="conversationSummary")

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    @field_validator("name", "email")
    @classmethod
    def required_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    def to_payload(self) -> Dict[str, Any]:
        """camelCase JSON shape shared by the webhooks and the browser form."""
        return self.model_dump(by_alias=True, exclude_none=True)


class LeadResponse(BaseModel):
    success: bool = True
    message: str
