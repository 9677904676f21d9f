from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "SlopGPT Chat API"
    log_level: str = "INFO"
    cors_allow_origins: List[str] = ["*"]
    contact_email: str = "hello@slopgpt.com"

    # Text generation
    llm_provider: str = "anthropic"
    anthropic_api_key: Optional[str] = None
    anthropic_base_url: str = "https://api.anthropic.com"
    anthropic_version: str = "2023-06-01"
    chat_model: str = Field(
        "claude-sonnet-4-20250514",
        validation_alias=AliasChoices("CHAT_MODEL", "ANTHROPIC_MODEL"),
    )
    chat_max_tokens: int = 500
    chat_temperature: Optional[float] = None
    llm_timeout: float = 60.0
    llm_connect_timeout: float = 5.0
    llm_health_timeout: float = 5.0
    llm_http_retries: int = 2
    llm_retry_backoff: float = 1.0

    # Ollama configuration
    ollama_base_url: str = Field(
        "http://ollama:11434",
        validation_alias=AliasChoices("OLLAMA_BASE_URL", "OLLAMA_URL"),
    )
    ollama_chat_model: str = Field(
        "llama3", validation_alias=AliasChoices("OLLAMA_CHAT_MODEL", "OLLAMA_MODEL")
    )

    # Lead channels
    slack_webhook_url: Optional[str] = None
    workflow_webhook_url: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("WORKFLOW_WEBHOOK_URL", "N8N_WEBHOOK_URL"),
    )
    lead_webhook_url: Optional[str] = None
    webhook_timeout: float = 10.0
    lead_source: str = "slopgpt-chat"
    lead_require_delivery: bool = False

    # Email delivery
    resend_api_key: Optional[str] = None
    resend_api_url: str = "https://api.resend.com/emails"
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_ssl: bool = False
    smtp_use_tls: bool = True
    smtp_timeout: float = 10.0
    lead_notification_from: str = "SlopGPT <noreply@slopgpt.com>"
    lead_email: str = "hello@slopgpt.com"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def lead_recipients(self) -> List[str]:
        return [
            recipient.strip()
            for recipient in self.lead_email.split(",")
            if recipient and recipient.strip()
        ]


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency; tests swap it through ``app.dependency_overrides``."""
    return settings
