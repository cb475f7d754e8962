#!/usr/bin/env python3
"""
Explicit configuration and collaborator wiring.

Entry points build one AppContext at startup and pass it to the handlers.
Secrets come from the environment (Firebase exposes defined secrets as env vars),
public settings from app_config.json.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .lib.app_config import get_app_config, get_config_value
from .services.anthropic_service import AnthropicClient, ChatCompleter, ANTHROPIC_URL, ANTHROPIC_VERSION
from .services.push_service import FirebasePushSender, PushSender
from .stores import (
    SettingsStore, DeviceRegistry, RecipeCatalog,
    FirestoreSettingsStore, FirestoreDeviceRegistry, FirestoreRecipeCatalog,
)

# Create logger for this module
logger = logging.getLogger(__name__)

DEFAULT_APP_NAME = 'CMLB Recipes'
DEFAULT_APP_URL = 'https://cjroberts28.github.io/cmlbRecipes/'
DEFAULT_TIMEZONE = 'America/New_York'
DEFAULT_SUGGESTION_MODEL = 'claude-haiku-4-5-20251001'
DEFAULT_SUGGESTION_MAX_TOKENS = 150
DEFAULT_NOTIFICATION_TITLE = "Tonight's Dinner Idea"
DEFAULT_REQUEST_TIMEOUT = 60.0


@dataclass(frozen=True)
class AppConfig:
    anthropic_api_key: Optional[str] = None
    anthropic_url: str = ANTHROPIC_URL
    anthropic_version: str = ANTHROPIC_VERSION
    suggestion_model: str = DEFAULT_SUGGESTION_MODEL
    suggestion_max_tokens: int = DEFAULT_SUGGESTION_MAX_TOKENS
    timezone: str = DEFAULT_TIMEZONE
    app_name: str = DEFAULT_APP_NAME
    app_url: str = DEFAULT_APP_URL
    icon_url: str = DEFAULT_APP_URL + 'favicon.svg'
    notification_title: str = DEFAULT_NOTIFICATION_TITLE
    request_timeout: Optional[float] = DEFAULT_REQUEST_TIMEOUT

    @classmethod
    def from_env(cls, environ=None, app_config: Optional[Dict[str, Any]] = None) -> "AppConfig":
        """
        Build the config from environment variables layered over app_config.json.

        Args:
            environ: Mapping to read instead of os.environ
            app_config: Already-loaded app_config.json contents
        """
        env = os.environ if environ is None else environ
        cfg = get_app_config() if app_config is None else app_config

        app_url = get_config_value('app_url', DEFAULT_APP_URL, config=cfg)
        if not app_url.endswith('/'):
            app_url += '/'

        timeout_raw = env.get('ANTHROPIC_TIMEOUT_SECONDS')
        try:
            request_timeout = float(timeout_raw) if timeout_raw else DEFAULT_REQUEST_TIMEOUT
        except ValueError:
            logger.warning(f"Invalid ANTHROPIC_TIMEOUT_SECONDS '{timeout_raw}', using {DEFAULT_REQUEST_TIMEOUT}")
            request_timeout = DEFAULT_REQUEST_TIMEOUT

        return cls(
            anthropic_api_key=env.get('ANTHROPIC_API_KEY') or None,
            anthropic_url=env.get('ANTHROPIC_API_URL', ANTHROPIC_URL),
            anthropic_version=env.get('ANTHROPIC_VERSION', ANTHROPIC_VERSION),
            suggestion_model=env.get('SUGGESTION_MODEL')
                or get_config_value('model', DEFAULT_SUGGESTION_MODEL, section='suggestion', config=cfg),
            suggestion_max_tokens=int(
                get_config_value('max_tokens', DEFAULT_SUGGESTION_MAX_TOKENS, section='suggestion', config=cfg)
            ),
            timezone=env.get('NOTIFICATION_TIMEZONE')
                or get_config_value('timezone', DEFAULT_TIMEZONE, section='notifications', config=cfg),
            app_name=get_config_value('app_name', DEFAULT_APP_NAME, config=cfg),
            app_url=app_url,
            icon_url=get_config_value('icon_url', app_url + 'favicon.svg', config=cfg),
            notification_title=get_config_value(
                'title', DEFAULT_NOTIFICATION_TITLE, section='notifications', config=cfg
            ),
            request_timeout=request_timeout,
        )


@dataclass
class AppContext:
    config: AppConfig
    settings_store: SettingsStore
    device_registry: DeviceRegistry
    recipe_catalog: RecipeCatalog
    push_sender: PushSender
    chat_completer: ChatCompleter


def build_context(config: Optional[AppConfig] = None, db=None) -> AppContext:
    """
    Wire the production collaborators.

    Firestore and Firebase Admin are initialized lazily on first use, so this is
    safe to call at import time of a Cloud Functions module.
    """
    if config is None:
        config = AppConfig.from_env()

    return AppContext(
        config=config,
        settings_store=FirestoreSettingsStore(db),
        device_registry=FirestoreDeviceRegistry(db),
        recipe_catalog=FirestoreRecipeCatalog(db),
        push_sender=FirebasePushSender(icon_url=config.icon_url, link=config.app_url),
        chat_completer=AnthropicClient(
            api_key=config.anthropic_api_key,
            api_url=config.anthropic_url,
            api_version=config.anthropic_version,
            timeout=config.request_timeout,
        ),
    )
