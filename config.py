import os
import json
import logging

from dotenv import load_dotenv

logger = logging.getLogger("config")

CONFIG_FILE = "config.json"

DEFAULT_CONFIG = {
    "client_secrets": "client_secrets.json",
    "token_path": "token_google.pickle",
    "page_size": 50,
    "max_folders": 500,
    "max_deletions": 0,
    "protected_names": [],
    "report_dir": "reports",
    "port": 8766
}

# env var -> (config key, converter)
ENV_OVERRIDES = {
    "DRIVE_CLIENT_SECRETS": ("client_secrets", str),
    "DRIVE_TOKEN_PATH": ("token_path", str),
    "DRIVE_PAGE_SIZE": ("page_size", int),
    "DRIVE_MAX_DELETIONS": ("max_deletions", int),
    "DRIVE_REPORT_DIR": ("report_dir", str),
    "DRIVE_PORT": ("port", int),
}


def load_config(path=CONFIG_FILE):
    """
    Load configuration: defaults, then config.json, then environment
    variables (a .env file is honoured).
    """
    load_dotenv()
    config = dict(DEFAULT_CONFIG)

    if path and os.path.exists(path):
        try:
            with open(path, "r") as f:
                config.update(json.load(f))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load config {path}: {e}")

    for env_name, (key, convert) in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value is None or value == "":
            continue
        try:
            config[key] = convert(value)
        except ValueError:
            logger.warning(f"Ignoring invalid {env_name}={value!r}")

    return config


def save_config(config, path=CONFIG_FILE):
    try:
        with open(path, "w") as f:
            json.dump(config, f, indent=4)
    except OSError as e:
        logger.error(f"Failed to save config: {e}")
        return False
    return True
