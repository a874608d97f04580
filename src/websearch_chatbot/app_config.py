from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from websearch_chatbot.agent_config import DEFAULT_MODEL, MAX_ITERATIONS
from websearch_chatbot.memory import DEFAULT_TTL_SECONDS


@dataclass
class RuntimeEnv:
    provider_api_key: str
    provider_env_var: str
    tavily_api_key: str


@dataclass
class AppConfig:
    provider_name: str
    model: str
    temperature: float
    max_iterations: int
    session_ttl_seconds: int
    request_timeout_seconds: float
    max_retries: int
    search_max_results: int
    host: str
    port: int
    log_level: str
    log_consumers: list | None


def load_json_config(path: Path | None = None) -> dict:
    config_path = path or Path.cwd() / "config.json"
    if config_path.exists():
        with open(config_path) as f:
            return json.load(f)
    return {}


def parse_app_config(config: dict) -> AppConfig:
    return AppConfig(
        provider_name=str(config.get("Provider", "groq")).strip().lower(),
        model=config.get("Model", DEFAULT_MODEL),
        temperature=float(config.get("Temperature", 1.0)),
        max_iterations=int(config.get("MaxIterations", MAX_ITERATIONS)),
        session_ttl_seconds=int(config.get("SessionTtlSeconds", DEFAULT_TTL_SECONDS)),
        request_timeout_seconds=float(config.get("RequestTimeoutSeconds", 30)),
        max_retries=int(config.get("MaxRetries", 3)),
        search_max_results=int(config.get("SearchMaxResults", 5)),
        host=config.get("Host", "0.0.0.0"),
        port=int(config.get("Port", 3000)),
        log_level=config.get("LogLevel", "INFO"),
        log_consumers=config.get("LogConsumers"),
    )


def resolve_runtime_env(provider_name: str) -> RuntimeEnv:
    if provider_name == "openai":
        provider_env_var = "OPENAI_API_KEY"
    else:
        provider_env_var = "GROQ_API_KEY"

    return RuntimeEnv(
        provider_api_key=os.environ.get(provider_env_var, ""),
        provider_env_var=provider_env_var,
        # WEB_CALLING is the variable name older deployments used for the Tavily key.
        tavily_api_key=os.environ.get("TAVILY_API_KEY") or os.environ.get("WEB_CALLING", ""),
    )
