"""
Process-wide configuration for the feedback service.

Settings are resolved once per process and cached. Each value comes from its
environment variable when set (Cloud Functions --set-secrets injects them
there), otherwise from Secret Manager.
"""


import logging
import os
from dataclasses import dataclass

from google.cloud import secretmanager

from .logging_utils import log_function

logger = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """A required configuration value could not be resolved."""


@dataclass(frozen=True)
class Settings:
    hmac_secret: str
    resend_api_key: str
    to_email: str
    from_email: str

    def __repr__(self):
        # Never let secrets leak through a stray log line
        return f"Settings(to_email={self.to_email!r}, from_email={self.from_email!r})"


# field name → (env var, Secret Manager id)
SETTING_SOURCES = {
    "hmac_secret": ("HMAC_SECRET", "feedback-hmac-secret"),
    "resend_api_key": ("RESEND_API_KEY", "resend-api-key"),
    "to_email": ("TO_EMAIL", "feedback-to-email"),
    "from_email": ("FROM_EMAIL", "feedback-from-email"),
}

# Module-level caches
_sm_client: secretmanager.SecretManagerServiceClient | None = None
_project_id: str | None = None
_settings: Settings | None = None


def _get_sm_client() -> secretmanager.SecretManagerServiceClient:
    """Return a cached Secret Manager client."""
    global _sm_client
    if _sm_client is None:
        _sm_client = secretmanager.SecretManagerServiceClient()
    return _sm_client


@log_function
def get_project_id() -> str:
    """Resolve and cache the GCP project ID.

    Resolution order:
      1. GCP_PROJECT env var
      2. GOOGLE_CLOUD_PROJECT env var
      3. GCP metadata server (Cloud Functions runtime)
    """
    global _project_id
    if _project_id is not None:
        return _project_id

    _project_id = os.environ.get("GCP_PROJECT") or os.environ.get(
        "GOOGLE_CLOUD_PROJECT"
    )
    if _project_id:
        return _project_id

    # Fallback: metadata service (only works on GCP)
    import requests

    metadata_server = (
        "http://metadata.google.internal/computeMetadata/v1/project/project-id"
    )
    response = requests.get(
        metadata_server, headers={"Metadata-Flavor": "Google"}, timeout=5
    )
    response.raise_for_status()
    _project_id = response.text
    return _project_id


@log_function(redact_result=True)
def get_secret(secret_id: str) -> str:
    """Fetch a secret value from Secret Manager.

    Returns the decoded, whitespace-stripped payload.
    """
    client = _get_sm_client()
    project_id = get_project_id()
    name = f"projects/{project_id}/secrets/{secret_id}/versions/latest"
    response = client.access_secret_version(request={"name": name})
    return response.payload.data.decode("UTF-8").strip()


def _resolve(field_name: str) -> str:
    env_var, secret_id = SETTING_SOURCES[field_name]

    value = (os.environ.get(env_var) or "").strip()
    if value:
        return value

    try:
        value = get_secret(secret_id)
    except Exception as e:
        raise ConfigError(
            f"{env_var} is not set and secret '{secret_id}' is unavailable: {e}"
        ) from e

    if not value:
        raise ConfigError(f"Secret '{secret_id}' is empty")
    return value


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings(**{name: _resolve(name) for name in SETTING_SOURCES})
        logger.info(f"Configuration loaded: {_settings!r}")
    return _settings


def _reset_caches():
    """Reset module-level caches (for testing only)."""
    global _sm_client, _project_id, _settings
    _sm_client = None
    _project_id = None
    _settings = None
