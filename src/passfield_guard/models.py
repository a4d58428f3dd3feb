from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

ACTION_IS_WHITELISTED = "isWhitelisted"
ACTION_GET_SUPPORT_EMAIL = "getSupportEmail"

DEFAULT_REFRESH_INTERVAL_MS = 60_000
DEFAULT_SUPPORT_EMAIL = "support@example.com"
DEFAULT_REQUEST_BUTTON_TITLE = "Request to Add to Whitelist"
DEFAULT_EMAIL_SUBJECT = "Whitelist Request for Site"
# The placeholder is filled in by the page side, never here.
DEFAULT_EMAIL_BODY = (
    "Dear Admin,\n\nPlease add this site to the whitelist: ${window.location.href}.\n\nThanks!"
)
DEFAULT_HOVER_TEXT = "Click to request adding this site to the trusted whitelist."


class LoadState(StrEnum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class TrustPattern(BaseModel):
    """One parsed trust-list entry.

    ``match_suffix`` is always ``"." + <lower-cased base domain>``; ``original``
    keeps the configured spelling for logs only.
    """

    model_config = ConfigDict(frozen=True)

    original: str
    is_wildcard: bool
    match_suffix: str


class BootstrapPayload(BaseModel):
    """Bootstrap configuration document (``config.json``).

    Every field is optional. Unknown keys are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    whitelist_url: str | None = Field(default=None, alias="whitelistUrl")
    support_email: str | None = Field(default=None, alias="supportEmail")
    request_button_title: str | None = Field(default=None, alias="requestButtonTitle")
    email_subject: str | None = Field(default=None, alias="emailSubject")
    email_body: str | None = Field(default=None, alias="emailBody")
    hover_text: str | None = Field(default=None, alias="hoverText")
    refresh_interval_ms: int | None = Field(default=None, gt=0, alias="refreshIntervalMs")

    @field_validator(
        "support_email",
        "request_button_title",
        "email_subject",
        "email_body",
        "hover_text",
        mode="before",
    )
    @classmethod
    def _ignore_non_string_display_field(cls, value: object) -> str | None:
        # Display strings are opaque; anything else falls back to the default.
        return value if isinstance(value, str) else None


class ConfigurationView(BaseModel):
    """Display and contact strings handed to the page side."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    support_email: str = Field(default=DEFAULT_SUPPORT_EMAIL, alias="supportEmail")
    request_button_title: str = Field(
        default=DEFAULT_REQUEST_BUTTON_TITLE, alias="requestButtonTitle"
    )
    email_subject: str = Field(default=DEFAULT_EMAIL_SUBJECT, alias="emailSubject")
    email_body: str = Field(default=DEFAULT_EMAIL_BODY, alias="emailBody")
    hover_text: str = Field(default=DEFAULT_HOVER_TEXT, alias="hoverText")

    def to_message(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


class TrustConfiguration(BaseModel):
    """Settings the trust store runs with, built once from the bootstrap payload."""

    model_config = ConfigDict(frozen=True)

    source_url: str = ""
    refresh_interval_ms: int = Field(default=DEFAULT_REFRESH_INTERVAL_MS, gt=0)
    support_email: str = DEFAULT_SUPPORT_EMAIL
    request_button_title: str = DEFAULT_REQUEST_BUTTON_TITLE
    email_subject: str = DEFAULT_EMAIL_SUBJECT
    email_body: str = DEFAULT_EMAIL_BODY
    hover_text: str = DEFAULT_HOVER_TEXT

    @classmethod
    def from_payload(
        cls,
        payload: BootstrapPayload,
        refresh_interval_ms: int = DEFAULT_REFRESH_INTERVAL_MS,
    ) -> TrustConfiguration:
        """Overlay the payload on the built-in defaults.

        Absent and empty fields keep the default; nothing else is validated.
        """
        overrides = {
            name: value
            for name, value in payload.model_dump(exclude={"refresh_interval_ms"}).items()
            if value
        }
        if "whitelist_url" in overrides:
            overrides["source_url"] = overrides.pop("whitelist_url")
        return cls(
            refresh_interval_ms=payload.refresh_interval_ms or refresh_interval_ms,
            **overrides,
        )

    def view(self) -> ConfigurationView:
        return ConfigurationView(
            support_email=self.support_email,
            request_button_title=self.request_button_title,
            email_subject=self.email_subject,
            email_body=self.email_body,
            hover_text=self.hover_text,
        )


@dataclass(frozen=True)
class StoreSnapshot:
    """Immutable view of the trust store, replaced as a single reference."""

    patterns: tuple[TrustPattern, ...] = ()
    configuration: TrustConfiguration = field(default_factory=TrustConfiguration)
