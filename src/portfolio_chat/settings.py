from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Dict

from dotenv import dotenv_values
from pydantic_settings import BaseSettings, SettingsConfigDict

from portfolio_chat.user_config import get_user_config_path, load_user_config


def _json_settings_source() -> Dict[str, Any]:
    return load_user_config(get_user_config_path())


def _limited_env_settings_source() -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    env: Dict[str, Any] = {}
    env.update(dotenv_values(".env"))
    env.update(os.environ)

    if "HF_API_KEY" in env:
        data["hf_api_key"] = env["HF_API_KEY"]
    if "PORT" in env:
        data["port"] = env["PORT"]
    if "API_URL" in env:
        data["api_url"] = env["API_URL"]
    if "LOG_LEVEL" in env:
        data["log_level"] = env["LOG_LEVEL"]
    return data


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    # OpenAI-compatible router in front of the hosted model
    hf_api_key: str | None = None
    hf_base_url: str = "https://router.huggingface.co/v1"
    chat_model: str = "meta-llama/Llama-3.1-8B-Instruct"
    temperature: float = 0.3
    max_tokens: int = 400
    request_timeout_s: float = 60.0
    history_limit: int = 5

    owner_name: str = "Athar Sayed"
    owner_summary: str = (
        "AI/ML Engineer pursuing M.Tech in AI at NMIMS. Expertise in Python, C++, "
        "TensorFlow, real-time systems, and production deployment."
    )
    contact_email: str = "sayedathar242@gmail.com"

    resume_pdf: str = "Athar-Sayed-Resume.pdf"
    portfolio_html: str = "index.html"
    static_dir: str = "."
    serve_static: bool = False

    cors_origins: str = "*"

    api_url: str = "http://localhost:5173"

    log_level: str = "INFO"
    log_json: bool = False

    port: int = 5173

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        return (
            init_settings,
            _json_settings_source,
            _limited_env_settings_source,
            file_secret_settings,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
