#!/usr/bin/env python3
"""
Web push delivery through Firebase Cloud Messaging
"""

import logging
from typing import List, Optional, Protocol

from firebase_admin import exceptions, messaging

from ..db import initialize_firebase_admin
from ..models import DeliveryResult

# Create logger for this module
logger = logging.getLogger(__name__)

# Error codes that mean the token will never work again
TOKEN_INVALID = 'invalid-registration-token'
TOKEN_UNREGISTERED = 'registration-token-not-registered'
STALE_TOKEN_ERRORS = frozenset({TOKEN_INVALID, TOKEN_UNREGISTERED})

# FCM accepts at most this many tokens per multicast message
MAX_MULTICAST_TOKENS = 500


class PushSender(Protocol):
    def send_multicast(self, title: str, body: str, tokens: List[str]) -> List[DeliveryResult]: ...


def classify_send_error(error: Optional[Exception]) -> Optional[str]:
    """
    Map a per-token FCM exception to an error code.

    The Admin SDK reports unregistered tokens as UnregisteredError and malformed
    tokens as InvalidArgumentError mentioning the registration token.
    """
    if error is None:
        return None
    if isinstance(error, messaging.UnregisteredError):
        return TOKEN_UNREGISTERED
    if isinstance(error, exceptions.InvalidArgumentError) and 'registration token' in str(error).lower():
        return TOKEN_INVALID
    code = getattr(error, 'code', None)
    if code:
        return str(code).lower().replace('_', '-')
    return type(error).__name__


class FirebasePushSender:
    """Sends one notification to many web push tokens with send_each_for_multicast"""

    def __init__(self, icon_url: str, link: str, app=None):
        self.icon_url = icon_url
        self.link = link
        self.app = app

    def build_message(self, title: str, body: str, tokens: List[str]) -> messaging.MulticastMessage:
        return messaging.MulticastMessage(
            tokens=tokens,
            notification=messaging.Notification(title=title, body=body),
            webpush=messaging.WebpushConfig(
                notification=messaging.WebpushNotification(
                    icon=self.icon_url,
                    badge=self.icon_url,
                    require_interaction=False,
                ),
                fcm_options=messaging.WebpushFCMOptions(link=self.link),
            ),
        )

    def send_multicast(self, title: str, body: str, tokens: List[str]) -> List[DeliveryResult]:
        app = self.app if self.app is not None else initialize_firebase_admin()
        results = []
        for start in range(0, len(tokens), MAX_MULTICAST_TOKENS):
            chunk = tokens[start:start + MAX_MULTICAST_TOKENS]
            batch_response = messaging.send_each_for_multicast(
                self.build_message(title, body, chunk), app=app
            )
            logger.info(
                f"[Push] FCM: {batch_response.success_count} sent, {batch_response.failure_count} failed"
            )
            for token, send_response in zip(chunk, batch_response.responses):
                error_code = None if send_response.success else classify_send_error(send_response.exception)
                if error_code:
                    logger.debug(f"[Push] Token ...{token[-8:]} failed: {error_code}")
                results.append(DeliveryResult(token=token, success=send_response.success, error_code=error_code))
        return results
