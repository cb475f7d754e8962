#!/usr/bin/env python3
"""
Static page routes: the Firebase Messaging service worker
"""

import logging
from flask import Blueprint, Response, current_app, render_template

from ..lib.app_config import get_app_config, get_config_value, get_firebase_config

# Create logger for this module
logger = logging.getLogger(__name__)

DEFAULT_FIREBASE_SDK_VERSION = '10.12.0'
DEFAULT_NOTIFICATION_BODY = "Tonight's dinner suggestion is ready."

bp = Blueprint('page', __name__)


def build_service_worker_context(config, app_config=None):
    """
    Values substituted into firebase-messaging-sw.js

    Args:
        config: AppConfig
        app_config: Optional app_config.json contents
    """
    if app_config is None:
        app_config = get_app_config()

    firebase_config = get_firebase_config(app_config)
    if not firebase_config:
        logger.warning("No 'firebase' section in app_config.json; service worker cannot initialize messaging")

    icon_path = get_config_value('icon_path', None, config=app_config)
    app_path = get_config_value('app_path', '/', config=app_config)

    return {
        'firebase_sdk_version': get_config_value(
            'firebase_sdk_version', DEFAULT_FIREBASE_SDK_VERSION, config=app_config
        ),
        'firebase_config': firebase_config,
        'default_title': config.app_name,
        'default_body': get_config_value(
            'default_body', DEFAULT_NOTIFICATION_BODY, section='notifications', config=app_config
        ),
        'icon_url': icon_path or config.icon_url,
        'app_url': config.app_url,
        'app_path': app_path.strip('/') or '/',
    }


@bp.route('/firebase-messaging-sw.js')
def firebase_messaging_sw():
    """Serve the push service worker, filled in from app_config.json"""
    context = build_service_worker_context(current_app.config['APP_CONTEXT'].config)
    script = render_template('firebase-messaging-sw.js', **context)
    response = Response(script, mimetype='application/javascript')
    response.headers['Service-Worker-Allowed'] = '/'
    response.headers['Cache-Control'] = 'no-cache'
    return response
