"""
Tests for kbchat.agents.models: resolving configuration into chat models.
"""

from unittest.mock import MagicMock, patch

import pytest

from kbchat.agents.models import ModelManager
from kbchat.utils.custom_exceptions import ModelConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in [
        "KBCHAT_ENDPOINT", "KBCHAT_MODEL", "KBCHAT_MODEL_ID_OVERRIDE", "KBCHAT_AWS_PROFILE",
        "AWS_REGION", "KBCHAT_TEMPERATURE", "KBCHAT_MAX_OUTPUT_TOKENS", "GOOGLE_API_KEY",
    ]:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of the picture
    monkeypatch.setattr("kbchat.agents.models.find_dotenv", lambda **kwargs: "")


def test_defaults_resolve_us_model_id():
    manager = ModelManager()
    assert manager.endpoint == "bedrock"
    assert manager.model == "haiku-4.5"

    cfg = manager.get_model_config()
    assert cfg["model_id"] == "us.anthropic.claude-haiku-4-5-20251001-v1:0"
    assert cfg["temperature"] == 0.3
    assert cfg["max_output_tokens"] == 4096


def test_eu_region_selects_eu_model_id(monkeypatch):
    monkeypatch.setenv("AWS_REGION", "eu-west-1")
    cfg = ModelManager(model="sonnet4.0").get_model_config()
    assert cfg["model_id"].startswith("eu.")
    assert cfg["max_output_tokens"] == 8192


@pytest.mark.parametrize("model_ids, region, expected", [
    ({"us": "us-id", "eu": "eu-id"}, "eu-central-1", "eu-id"),
    ({"us": "us-id"}, "ap-southeast-2", "us-id"),
    ({"eu": "eu-id"}, "us-east-1", "eu-id"),
])
def test_region_specific_model_id(model_ids, region, expected):
    assert ModelManager.get_region_specific_model_id(model_ids, region) == expected


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("KBCHAT_TEMPERATURE", "0.9")
    monkeypatch.setenv("KBCHAT_MAX_OUTPUT_TOKENS", "512")
    monkeypatch.setenv("KBCHAT_MODEL_ID_OVERRIDE", "custom-model-id")

    cfg = ModelManager().get_model_config()
    assert cfg["temperature"] == 0.9
    assert cfg["max_output_tokens"] == 512
    assert cfg["model_id"] == "custom-model-id"


def test_unknown_endpoint_rejected():
    with pytest.raises(ModelConfigurationError, match="Unknown endpoint"):
        ModelManager(endpoint="openai")


def test_unknown_model_rejected():
    with pytest.raises(ModelConfigurationError, match="not available"):
        ModelManager(endpoint="google", model="haiku")


def test_model_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        ModelManager(endpoint="nowhere")


@patch("kbchat.agents.models.ChatBedrock")
@patch("kbchat.agents.models.boto3")
def test_bedrock_model_uses_profile_session(mock_boto3, mock_bedrock, monkeypatch):
    monkeypatch.setenv("KBCHAT_AWS_PROFILE", "team")
    client = MagicMock()
    mock_boto3.Session.return_value.client.return_value = client

    ModelManager().create_chat_model(temperature=0.7)

    mock_boto3.Session.assert_called_once_with(profile_name="team", region_name="us-west-2")
    mock_boto3.Session.return_value.client.assert_called_once_with("bedrock-runtime")
    kwargs = mock_bedrock.call_args.kwargs
    assert kwargs["client"] is client
    assert kwargs["temperature"] == 0.7
    assert kwargs["model_id"] == "us.anthropic.claude-haiku-4-5-20251001-v1:0"


@patch("kbchat.agents.models.ChatGoogleGenerativeAI")
def test_google_model_passes_api_key(mock_google, monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "secret")
    ModelManager(endpoint="google").create_chat_model()

    kwargs = mock_google.call_args.kwargs
    assert kwargs["model"] == "gemini-2.0-flash"
    assert kwargs["google_api_key"] == "secret"
    assert kwargs["max_output_tokens"] == 8192


@patch("kbchat.agents.models.ChatGoogleGenerativeAI")
def test_blank_google_api_key_is_ignored(mock_google, monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "  ")
    ModelManager(endpoint="google").create_chat_model()
    assert "google_api_key" not in mock_google.call_args.kwargs


def test_model_entries_only_carry_settings_the_manager_reads():
    from kbchat.config.models_config import MODEL_CONFIGS

    known = {"model_id", "temperature", "max_output_tokens", "region"}
    for endpoint, models in MODEL_CONFIGS.items():
        for name, entry in models.items():
            assert set(entry) <= known, f"{endpoint}/{name}"
