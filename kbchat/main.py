import argparse
import os
import sys

from kbchat.utils.logging_utils import logger
from kbchat.utils.version_util import get_current_version

import kbchat.config.models_config as config
from kbchat.config.app_config import DEFAULT_HOST, DEFAULT_PORT


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        description="Run the kbchat dashboard API",
        formatter_class=argparse.RawTextHelpFormatter
    )

    default_model = config.DEFAULT_MODELS[config.DEFAULT_ENDPOINT]

    parser.add_argument("--endpoint", type=str, choices=list(config.MODEL_CONFIGS), default=None,
                        help=f"Model endpoint to use (default: {config.DEFAULT_ENDPOINT})")
    parser.add_argument("--model", type=str, default=None,
                        help=f"Model to use from selected endpoint (default: {default_model})\n"
                             + config.format_model_list())
    parser.add_argument("--model-id", type=str, default=None,
                        help="Override the model ID directly (advanced usage, bypasses model name lookup)")
    parser.add_argument("--profile", type=str, default=None,
                        help="AWS profile to use (e.g., --profile kbchat)")
    parser.add_argument("--region", type=str, default=None,
                        help="AWS region to use (e.g., --region us-east-1)")
    parser.add_argument("--temperature", type=float, default=None,
                        help="Temperature for chat answers")
    parser.add_argument("--max-output-tokens", type=int, default=None,
                        help="Maximum number of tokens to generate in a response")
    parser.add_argument("--data-dir", type=str, default=None,
                        help="Directory for knowledge-base data (default: ~/.kbchat)")
    parser.add_argument("--host", type=str, default=DEFAULT_HOST,
                        help=f"Interface to bind (default: {DEFAULT_HOST})")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT,
                        help=f"Port number to serve on (default: {DEFAULT_PORT})")
    parser.add_argument("--list-models", action="store_true",
                        help="List all supported endpoints and their available models")
    parser.add_argument("--version", action="store_true",
                        help="Prints the version of kbchat")
    return parser.parse_args(argv)


def setup_environment(args):
    """Export command line choices so the app factory picks them up."""
    endpoint = args.endpoint
    if args.model and not endpoint:
        endpoint = config.find_endpoint_for_model(args.model)
        if endpoint is None:
            raise ValueError(f"Unknown model '{args.model}'. Use --list-models to see the options.")

    mapping = {
        "KBCHAT_ENDPOINT": endpoint,
        "KBCHAT_MODEL": args.model,
        "KBCHAT_MODEL_ID_OVERRIDE": args.model_id,
        "KBCHAT_AWS_PROFILE": args.profile,
        "AWS_REGION": args.region,
        "KBCHAT_TEMPERATURE": args.temperature,
        "KBCHAT_MAX_OUTPUT_TOKENS": args.max_output_tokens,
        "KBCHAT_HOME": args.data_dir,
    }
    for name, value in mapping.items():
        if value is not None:
            os.environ[name] = str(value)


def main(argv=None):
    args = parse_arguments(argv)

    if args.version:
        print(f"kbchat version {get_current_version()}")
        return 0

    if args.list_models:
        print(config.format_model_list())
        return 0

    try:
        setup_environment(args)
        from kbchat.server import create_app
        app = create_app()
    except ValueError as e:
        logger.error(str(e))
        return 1

    import uvicorn
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
