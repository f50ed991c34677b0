"""
Identity provider settings.

Sign-in itself (magic links, Google OAuth) lives in the external identity
provider. This module only holds the settings the API needs to trust its
sessions, and refuses to boot when they are unusable.
"""
import logging
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel

from portal.core import config
from portal.core.errors import IdentityInitError

logger = logging.getLogger(__name__)


class IdentityConfig(BaseModel):
    app_name: str
    api_domain: str
    website_domain: str
    connection_uri: str
    api_base_path: str = "/auth"
    api_key: Optional[str] = None
    google_enabled: bool = False


def load_identity_config() -> IdentityConfig:
    return IdentityConfig(
        app_name=config.SUPERTOKENS_APP_NAME,
        api_domain=config.SUPERTOKENS_API_DOMAIN,
        website_domain=config.FRONTEND_URL,
        connection_uri=config.SUPERTOKENS_CONNECTION_URI,
        api_base_path=config.SUPERTOKENS_API_BASE_PATH,
        api_key=config.SUPERTOKENS_API_KEY,
        google_enabled=config.GOOGLE_AUTH_ENABLED,
    )


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value or "")
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def init_identity(settings: IdentityConfig) -> IdentityConfig:
    """
    Check the identity settings once at startup.

    Raises:
        IdentityInitError: any setting is missing or malformed
    """
    problems = []
    if not settings.app_name.strip():
        problems.append("app_name is empty")
    for name in ("api_domain", "website_domain", "connection_uri"):
        if not _is_http_url(getattr(settings, name)):
            problems.append(f"{name} must be an http(s) URL")
    if not settings.api_base_path.startswith("/"):
        problems.append("api_base_path must start with '/'")

    if problems:
        logger.critical(f"Identity provider init failed: {'; '.join(problems)}")
        raise IdentityInitError("; ".join(problems))

    logger.info(
        f"Identity provider configured: app={settings.app_name}, "
        f"api_domain={settings.api_domain}, google_enabled={settings.google_enabled}"
    )
    return settings
