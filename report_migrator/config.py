"""Central configuration for the report migrator.

Settings are resolved once per run and passed explicitly to the collaborators
that need them; nothing here holds a client handle.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping

from report_migrator.application.use_cases import FailurePolicy
from report_migrator.domain.errors import ConfigurationError

DEFAULT_CRM_BASE_URL = "https://api.hubapi.com"
DEFAULT_DATABASE_URL = "sqlite:///migration.db"
DEFAULT_OUTPUT_DIR = Path("output")
DEFAULT_REQUEST_DELAY = 0.5
DEFAULT_HTTP_TIMEOUT = 30.0


@dataclass(slots=True, frozen=True)
class Settings:
    crm_base_url: str
    crm_token: str | None
    database_url: str
    output_dir: Path
    request_delay: float
    failure_policy: FailurePolicy
    http_timeout: float

    def with_overrides(self, **overrides: object) -> "Settings":
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})


def _float(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = environ.get(key, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}") from exc
    if value < 0:
        raise ConfigurationError(f"{key} must not be negative")
    return value


def parse_policy(raw: str) -> FailurePolicy:
    try:
        return FailurePolicy(raw.strip().lower())
    except ValueError as exc:
        choices = ", ".join(policy.value for policy in FailurePolicy)
        raise ConfigurationError(f"Unknown failure policy {raw!r}; expected one of {choices}") from exc


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    return Settings(
        crm_base_url=env.get("MIGRATOR_CRM_BASE_URL", DEFAULT_CRM_BASE_URL).rstrip("/"),
        crm_token=env.get("MIGRATOR_CRM_TOKEN") or None,
        database_url=env.get("MIGRATOR_DATABASE_URL", DEFAULT_DATABASE_URL),
        output_dir=Path(env.get("MIGRATOR_OUTPUT_DIR", str(DEFAULT_OUTPUT_DIR))),
        request_delay=_float(env, "MIGRATOR_REQUEST_DELAY", DEFAULT_REQUEST_DELAY),
        failure_policy=parse_policy(env.get("MIGRATOR_FAILURE_POLICY", FailurePolicy.ABORT.value)),
        http_timeout=_float(env, "MIGRATOR_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
    )
