#!/usr/bin/env python3
"""
Anthropic Messages API client shared by the chat proxy and the dinner suggestion job
"""

import logging
import requests
from typing import Any, Dict, List, Optional, Protocol
from urllib.parse import urlparse

# Create logger for this module
logger = logging.getLogger(__name__)

ANTHROPIC_URL = 'https://api.anthropic.com/v1/messages'
ANTHROPIC_VERSION = '2023-06-01'


class ConfigurationError(Exception):
    """Raised when a required setting (such as the API key) is missing"""


class ChatCompleter(Protocol):
    def complete(
        self,
        model: str,
        max_tokens: int,
        system: Optional[str],
        messages: List[Dict[str, Any]]
    ) -> Dict[str, Any]: ...

    def forward(self, payload: Dict[str, Any]) -> Dict[str, Any]: ...


class AnthropicClient:
    """
    Thin wrapper around POST /v1/messages.

    Neither method retries or validates payload contents. Non-2xx responses are
    logged and their JSON body is returned to the caller unchanged.
    """

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str = ANTHROPIC_URL,
        api_version: str = ANTHROPIC_VERSION,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.api_version = api_version
        self.timeout = timeout
        self.session = session

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY is not configured")
        return {
            'Content-Type': 'application/json',
            'x-api-key': self.api_key,
            'anthropic-version': self.api_version,
        }

    def post_messages(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Send a Messages API payload and return the decoded JSON response.

        Raises:
            ConfigurationError: no API key
            requests.RequestException: network failure
            ValueError: response body is not JSON
        """
        headers = self._headers()
        post = self.session.post if self.session is not None else requests.post

        logger.debug(f"POST {self.api_url} (model={payload.get('model')})")
        response = post(self.api_url, headers=headers, json=payload, timeout=self.timeout)

        if not response.ok:
            error_text = response.text[:500] if response.text else "No response body"
            logger.warning(f"Anthropic API returned {response.status_code}: {error_text}")

        return response.json()

    def forward(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Relay a client payload unchanged"""
        return self.post_messages(payload)

    def complete(
        self,
        model: str,
        max_tokens: int,
        system: Optional[str],
        messages: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        return self.post_messages({
            'model': model,
            'max_tokens': max_tokens,
            'system': system,
            'messages': messages,
        })


def check_anthropic_health(client: AnthropicClient) -> Dict[str, Any]:
    """
    Lightweight reachability check for the health endpoint.
    Does not spend tokens: only a HEAD request against the API host.

    Returns:
        Dictionary with status, api_key_configured, reachable, and error fields
    """
    status = "healthy"
    reachable = False
    error = None
    api_key_configured = bool(client.api_key)

    if not api_key_configured:
        return {
            'status': 'degraded',
            'api_key_configured': False,
            'reachable': False,
            'error': 'ANTHROPIC_API_KEY not configured'
        }

    parsed_url = urlparse(client.api_url)
    base_url = f"{parsed_url.scheme}://{parsed_url.netloc}"
    try:
        requests.head(base_url, timeout=2, allow_redirects=True)
        # Any HTTP response, even 404, means the host is up
        reachable = True
    except requests.exceptions.Timeout:
        error = "Connection timeout"
        status = "degraded"
    except requests.exceptions.RequestException as e:
        error = f"Connection error - API unreachable: {e}"
        status = "degraded"

    return {
        'status': status,
        'api_key_configured': api_key_configured,
        'reachable': reachable,
        'error': error
    }
