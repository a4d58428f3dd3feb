import pytest
from pydantic import ValidationError

from passfield_guard.models import (
    DEFAULT_EMAIL_BODY,
    DEFAULT_SUPPORT_EMAIL,
    BootstrapPayload,
    ConfigurationView,
    TrustConfiguration,
)


def test_from_payload_overrides_present_fields():
    payload = BootstrapPayload.model_validate(
        {"whitelistUrl": "https://lists.test/w.txt", "supportEmail": "it@corp.test"}
    )
    config = TrustConfiguration.from_payload(payload)
    assert config.source_url == "https://lists.test/w.txt"
    assert config.support_email == "it@corp.test"
    assert config.email_body == DEFAULT_EMAIL_BODY
    assert config.refresh_interval_ms == 60000


def test_from_payload_empty_strings_keep_defaults():
    payload = BootstrapPayload.model_validate({"supportEmail": "", "whitelistUrl": ""})
    config = TrustConfiguration.from_payload(payload)
    assert config.support_email == DEFAULT_SUPPORT_EMAIL
    assert config.source_url == ""


def test_refresh_interval_from_payload_or_fallback():
    assert TrustConfiguration.from_payload(BootstrapPayload(), 5000).refresh_interval_ms == 5000
    payload = BootstrapPayload.model_validate({"refreshIntervalMs": 250})
    assert TrustConfiguration.from_payload(payload, 5000).refresh_interval_ms == 250


def test_refresh_interval_must_be_positive():
    with pytest.raises(ValidationError):
        BootstrapPayload.model_validate({"refreshIntervalMs": 0})


def test_unknown_payload_keys_are_ignored():
    payload = BootstrapPayload.model_validate({"theme": "dark"})
    assert payload.whitelist_url is None


def test_view_serialises_wire_names():
    message = ConfigurationView().to_message()
    assert set(message) == {
        "supportEmail",
        "requestButtonTitle",
        "emailSubject",
        "emailBody",
        "hoverText",
    }
    assert "${window.location.href}" in message["emailBody"]


def test_non_string_display_fields_fall_back_to_defaults():
    payload = BootstrapPayload.model_validate(
        {"whitelistUrl": "w.txt", "supportEmail": 42, "hoverText": ["x"], "emailSubject": "Unlock"}
    )
    config = TrustConfiguration.from_payload(payload)
    assert config.support_email == DEFAULT_SUPPORT_EMAIL
    assert config.email_subject == "Unlock"
    assert config.source_url == "w.txt"


def test_non_string_whitelist_url_is_rejected():
    with pytest.raises(ValidationError):
        BootstrapPayload.model_validate({"whitelistUrl": 42})
