#!/usr/bin/env python3
"""
Flask app exposing the CMLB functions over HTTP for local development
and for functions-framework deployments.
"""

import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS

from .context import AppContext, build_context
from .lib.logging_config import setup_logging
from .services.anthropic_service import AnthropicClient, check_anthropic_health

# Create logger for this module
logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).parent
PROJECT_ROOT = BASE_DIR.parent


def check_database_health(context: AppContext):
    """Time a single settings read; any exception marks the database unhealthy"""
    try:
        start_time = time.time()
        context.settings_store.load()
        return {
            'status': 'healthy',
            'available': True,
            'response_time_ms': round((time.time() - start_time) * 1000, 2),
            'error': None
        }
    except Exception as e:
        logger.warning(f"[Health] Firestore check failed: {e}")
        return {
            'status': 'unhealthy',
            'available': False,
            'response_time_ms': None,
            'error': str(e)
        }


def create_app(context: Optional[AppContext] = None) -> Flask:
    """
    Build the Flask app.

    Args:
        context: Collaborators to serve with; defaults to the Firestore/Anthropic wiring
    """
    if context is None:
        load_dotenv(PROJECT_ROOT / '.env')
        setup_logging()
        context = build_context()

    app = Flask(__name__, template_folder=str(BASE_DIR / 'templates'))
    app.config['APP_CONTEXT'] = context

    # The recipe app is served from another origin
    CORS(app, resources={r'/api/*': {'origins': '*'}})

    @app.route('/health', methods=['GET'])
    def health_check():
        """
        Reports Firestore and Anthropic status.
        503 when Firestore is down, 200 (possibly 'degraded') otherwise.
        """
        services = {'database': check_database_health(context)}

        chat_completer = context.chat_completer
        if isinstance(chat_completer, AnthropicClient):
            services['anthropic'] = check_anthropic_health(chat_completer)

        overall_status = 'healthy'
        http_status = 200
        if services['database']['status'] == 'unhealthy':
            overall_status = 'unhealthy'
            http_status = 503
        elif any(s['status'] == 'degraded' for s in services.values()):
            overall_status = 'degraded'

        return jsonify({
            'status': overall_status,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'services': services
        }), http_status

    from .routes.proxy_routes import bp as proxy_bp
    from .routes.page_routes import bp as page_bp
    from .routes.scheduled_jobs_routes import bp as scheduled_jobs_bp
    app.register_blueprint(proxy_bp)
    app.register_blueprint(page_bp)
    app.register_blueprint(scheduled_jobs_bp)

    return app
