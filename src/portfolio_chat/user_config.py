from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict

DEFAULT_USER_CONFIG_PATH = "config/user_settings.json"

ALLOWED_KEYS = {
    "chat_model",
    "temperature",
    "max_tokens",
    "history_limit",
    "owner_name",
    "contact_email",
    "resume_pdf",
    "portfolio_html",
    "static_dir",
    "serve_static",
}


def get_user_config_path() -> str:
    return os.environ.get("USER_SETTINGS_FILE", DEFAULT_USER_CONFIG_PATH)


def load_user_config(path: str | None = None) -> Dict[str, Any]:
    config_path = Path(path or get_user_config_path())
    if not config_path.exists():
        return {}
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except Exception:
        return {}
    if not isinstance(data, dict):
        return {}
    return {key: data[key] for key in ALLOWED_KEYS if key in data}

