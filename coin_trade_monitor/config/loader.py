import logging
import os
import re
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Loads a YAML configuration file, resolving environment variables.

    Values written as ``${ENV_VAR}`` are replaced by the variable's value and
    ``${ENV_VAR:default}`` falls back to ``default`` when the variable is
    unset. A ``.env`` file in the working directory is loaded first without
    overriding variables that are already set, so exchange credentials never
    have to live in the YAML file itself.

    Args:
        config_path (str): Path to the YAML configuration file.

    Returns:
        Dict[str, Any]: The loaded and resolved configuration.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        ValueError: If the YAML is malformed or a required environment
            variable is not set.
    """
    load_dotenv(override=False)

    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise ValueError(f"Configuration file {config_path} must contain a mapping")

    used_env_vars = set()
    defaulted_env_vars = set()

    def replace_env_var(match):
        full_match = match.group(1)

        if ":" in full_match:
            env_var_name, default_value = full_match.split(":", 1)
            env_var_name = env_var_name.strip()
            env_var_value = os.getenv(env_var_name)
            if env_var_value is None:
                defaulted_env_vars.add(env_var_name)
                return default_value.strip()
            used_env_vars.add(env_var_name)
            return env_var_value.strip()

        env_var_name = full_match.strip()
        env_var_value = os.getenv(env_var_name)
        if env_var_value is None:
            raise ValueError(
                f"Environment variable '{env_var_name}' required by configuration "
                f"'{config_path}' is not set. Please set it in .env or export it."
            )
        used_env_vars.add(env_var_name)
        return env_var_value.strip()

    def resolve_env_vars(data: Any) -> Any:
        if isinstance(data, dict):
            return {k: resolve_env_vars(v) for k, v in data.items()}
        elif isinstance(data, list):
            return [resolve_env_vars(elem) for elem in data]
        elif isinstance(data, str):
            return ENV_VAR_PATTERN.sub(replace_env_var, data)
        return data

    resolved_config = resolve_env_vars(config)

    if used_env_vars:
        logger.debug(f"Resolved {len(used_env_vars)} environment variables")
    if defaulted_env_vars:
        logger.info(f"Using defaults for {len(defaulted_env_vars)} environment variables")

    logger.debug(f"Loaded configuration from {Path(config_path).resolve()}")
    return resolved_config
