"""Configuration loading.

Every section and key is optional; callers read values with dict.get and
their own defaults.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_CONFIG_PATH = "config.json"

# Environment variables applied only when the file leaves the key empty.
ENV_OVERRIDES = {
    "HUMANIZER_API_KEY": ("{provider}", "api_key"),
    "ZEROGPT_API_KEY": ("zerogpt", "api_key"),
}


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Load configuration from a JSON file.

    A missing file yields an empty config so that defaults apply everywhere.

    Args:
        config_path: Path to the JSON configuration file.

    Returns:
        Configuration dictionary with environment credential overrides applied.
    """
    path = Path(config_path)
    if path.exists():
        with open(path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    else:
        config = {}

    provider = config.get("provider", "deepseek")
    for env_var, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if not value:
            continue
        section = section.format(provider=provider)
        section_config = config.setdefault(section, {})
        if not section_config.get(key):
            section_config[key] = value

    return config


def resolve_config(config: Optional[Dict[str, Any]] = None, config_path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Return config if given, otherwise load it from config_path."""
    if config is None:
        return load_config(config_path)
    return config
