"""
Chat model construction.

The model manager resolves the configured endpoint/model into a LangChain
chat model. Nothing here is a process-wide singleton: the server builds one
manager at start-up and hands the resulting models to request handlers.
"""
from typing import Optional, Dict, Any
import os

import boto3
from dotenv import load_dotenv
from dotenv.main import find_dotenv
from langchain_aws import ChatBedrock
from langchain_core.language_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI

import kbchat.config.models_config as config
from kbchat.utils.custom_exceptions import ModelConfigurationError
from kbchat.utils.logging_utils import logger


class ModelManager:
    """Manages model configuration and initialization."""

    def __init__(self, endpoint: Optional[str] = None, model: Optional[str] = None):
        dotenv_path = find_dotenv(usecwd=True)
        if dotenv_path:
            load_dotenv(dotenv_path)
            logger.debug(f"Loaded environment variables from {dotenv_path}")

        self.endpoint = endpoint or os.environ.get("KBCHAT_ENDPOINT", config.DEFAULT_ENDPOINT)
        if self.endpoint not in config.MODEL_CONFIGS:
            raise ModelConfigurationError(
                f"Unknown endpoint '{self.endpoint}'. Available: {', '.join(config.MODEL_CONFIGS)}"
            )

        self.model = model or os.environ.get("KBCHAT_MODEL") or config.DEFAULT_MODELS[self.endpoint]
        if self.model not in config.MODEL_CONFIGS[self.endpoint]:
            raise ModelConfigurationError(
                f"Model '{self.model}' is not available on endpoint '{self.endpoint}'. "
                f"Available: {', '.join(config.get_available_models(self.endpoint))}"
            )

        self.model_id_override = os.environ.get("KBCHAT_MODEL_ID_OVERRIDE")
        self.aws_profile = os.environ.get("KBCHAT_AWS_PROFILE")
        self.region = os.environ.get("AWS_REGION") or config.MODEL_CONFIGS[self.endpoint][self.model].get(
            "region", config.DEFAULT_REGION
        )

    def get_model_config(self) -> Dict[str, Any]:
        """
        Get the effective configuration for the selected model.

        Global defaults are overridden by the model entry, which is in turn
        overridden by KBCHAT_* environment variables.
        """
        model_config = dict(config.GLOBAL_MODEL_DEFAULTS)
        model_config.update(config.MODEL_CONFIGS[self.endpoint][self.model])

        for env_var, key in config.ENV_VAR_MAPPING.items():
            value = os.environ.get(env_var)
            if value is None or value == "":
                continue
            model_config[key] = int(value) if key == "max_output_tokens" else float(value)

        model_id = model_config["model_id"]
        if isinstance(model_id, dict):
            model_id = self.get_region_specific_model_id(model_id, self.region)
        if self.model_id_override:
            logger.info(f"Using model ID override: {self.model_id_override} instead of {model_id}")
            model_id = self.model_id_override
        model_config["model_id"] = model_id
        return model_config

    @staticmethod
    def get_region_specific_model_id(model_ids: Dict[str, str], region: str) -> str:
        """Pick the model id matching the region prefix, falling back to 'us'."""
        prefix = region.split("-", 1)[0] if region else "us"
        if prefix in model_ids:
            return model_ids[prefix]
        if "us" in model_ids:
            logger.warning(f"No model id for region {region}, using the 'us' model id")
            return model_ids["us"]
        return next(iter(model_ids.values()))

    def create_chat_model(self, temperature: Optional[float] = None) -> BaseChatModel:
        """Build a chat model; ``temperature`` overrides the configured value."""
        model_config = self.get_model_config()
        if temperature is not None:
            model_config["temperature"] = temperature

        if self.endpoint == "bedrock":
            return self._initialize_bedrock_model(model_config)
        return self._initialize_google_model(model_config)

    def _initialize_bedrock_model(self, model_config: Dict[str, Any]) -> BaseChatModel:
        if self.aws_profile:
            logger.info(f"Using AWS profile: {self.aws_profile}")
        else:
            logger.info("Using default AWS credentials")
        logger.info(f"Initializing Bedrock model {model_config['model_id']} in {self.region}")

        session = boto3.Session(profile_name=self.aws_profile, region_name=self.region)
        client = session.client("bedrock-runtime")
        return ChatBedrock(
            model_id=model_config["model_id"],
            client=client,
            region_name=self.region,
            temperature=model_config["temperature"],
            max_tokens=model_config["max_output_tokens"],
            beta_use_converse_api=True,
        )

    def _initialize_google_model(self, model_config: Dict[str, Any]) -> BaseChatModel:
        google_api_key = os.environ.get("GOOGLE_API_KEY")
        if google_api_key is not None and not google_api_key.strip():
            logger.warning("GOOGLE_API_KEY is present but empty. Treating as not set to allow ADC.")
            google_api_key = None

        logger.info(f"Initializing Google model {model_config['model_id']}")
        kwargs = {}
        if google_api_key:
            kwargs["google_api_key"] = google_api_key
        return ChatGoogleGenerativeAI(
            model=model_config["model_id"],
            temperature=model_config["temperature"],
            max_output_tokens=model_config["max_output_tokens"],
            **kwargs
        )
