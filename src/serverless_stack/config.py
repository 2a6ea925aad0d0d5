"""
Project configuration for Serverless Stack apps
Handles sst.json, CDK context and environment variable lookups
"""
import os
import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "sst.json"

DEFAULT_STAGE = "dev"
DEFAULT_REGION = "us-east-1"


def load_project_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the project config file

    Args:
        path: Path to sst.json (defaults to the current directory)

    Returns:
        Parsed config, or an empty dict when the file does not exist
    """
    config_path = Path(path) if path else Path.cwd() / CONFIG_FILE_NAME

    if not config_path.exists():
        logger.debug(f"No project config found at {config_path}")
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {config_path}: {e}")

    if not isinstance(config, dict):
        raise ValueError(f"Expected a JSON object in {config_path}")

    return config


def get_env_setting(key: str) -> Optional[str]:
    """Get an SST_* environment variable, treating empty values as unset"""
    return os.environ.get(f"SST_{key.upper()}") or None


def get_setting(
    key: str,
    context: Dict[str, Any] = None,
    default: Optional[str] = None,
    config: Dict[str, Any] = None
) -> Optional[str]:
    """
    Resolve a setting: CDK context, then SST_<KEY>, then sst.json, then default
    """
    if context and context.get(key):
        return context[key]

    env_value = get_env_setting(key)
    if env_value:
        return env_value

    if config is None:
        config = load_project_config()

    return config.get(key) or default


def get_account() -> Optional[str]:
    """Get the AWS account the CDK toolkit resolved, if any"""
    return os.environ.get("CDK_DEFAULT_ACCOUNT")
