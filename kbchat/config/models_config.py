"""
Model configuration for kbchat.

Endpoints map model aliases to provider model ids. Bedrock ids may be keyed
by region prefix ("us", "eu") and are resolved against the active region.
"""

DEFAULT_ENDPOINT = "bedrock"
DEFAULT_MODELS = {
    "bedrock": "haiku-4.5",
    "google": "gemini-2.0-flash",
}

# Default region when not specified
DEFAULT_REGION = "us-west-2"

GLOBAL_MODEL_DEFAULTS = {
    "temperature": 0.3,
    "max_output_tokens": 4096,
}

MODEL_CONFIGS = {
    "bedrock": {
        "haiku-4.5": {
            "model_id": {
                "us": "us.anthropic.claude-haiku-4-5-20251001-v1:0",
                "eu": "eu.anthropic.claude-haiku-4-5-20251001-v1:0",
            },
        },
        "haiku": {
            "model_id": {
                "us": "us.anthropic.claude-3-haiku-20240307-v1:0",
                "eu": "anthropic.claude-3-haiku-20240307-v1:0",
            },
        },
        "sonnet4.0": {
            "model_id": {
                "us": "us.anthropic.claude-sonnet-4-20250514-v1:0",
                "eu": "eu.anthropic.claude-sonnet-4-20250514-v1:0",
            },
            "max_output_tokens": 8192,
        },
        "nova-lite": {
            "model_id": {
                "us": "us.amazon.nova-lite-v1:0",
            },
            "max_output_tokens": 5000,
        },
        "nova-micro": {
            "model_id": {
                "us": "us.amazon.nova-micro-v1:0",
            },
            "max_output_tokens": 5000,
        },
    },
    "google": {
        "gemini-2.0-flash": {
            "model_id": "gemini-2.0-flash",
            "max_output_tokens": 8192,
        },
        "gemini-2.0-flash-lite": {
            "model_id": "gemini-2.0-flash-lite",
            "max_output_tokens": 8192,
        },
        "gemini-2.5-pro": {
            "model_id": "gemini-2.5-pro",
            "max_output_tokens": 65536,
        },
    },
}

# Environment variables that override model settings
ENV_VAR_MAPPING = {
    "KBCHAT_TEMPERATURE": "temperature",
    "KBCHAT_MAX_OUTPUT_TOKENS": "max_output_tokens",
}


def get_available_models(endpoint=None):
    """Get list of available models for an endpoint or all endpoints."""
    if endpoint:
        if endpoint not in MODEL_CONFIGS:
            return []
        return list(MODEL_CONFIGS[endpoint].keys())

    all_models = []
    for endpoint_models in MODEL_CONFIGS.values():
        all_models.extend(endpoint_models.keys())
    return all_models


def find_endpoint_for_model(model):
    """Find which endpoint contains the specified model."""
    for endpoint, models in MODEL_CONFIGS.items():
        if model in models:
            return endpoint
    return None


def format_model_list() -> str:
    """Render every endpoint and its models, marking the defaults."""
    lines = []
    for endpoint, models in MODEL_CONFIGS.items():
        default = DEFAULT_MODELS.get(endpoint)
        names = [f"*{m}" if m == default else m for m in sorted(models)]
        lines.append(f"{endpoint}: {', '.join(names)}")
    return "\n".join(lines)
