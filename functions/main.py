"""
Cloud Functions for Firebase entry point for the CMLB recipe catalog.

Functions:
    claude_proxy            - HTTPS proxy to the Anthropic Messages API (used by the chat UI)
    send_dinner_suggestion  - Hourly scheduled function; pushes a daily Claude dinner idea
"""

import logging
import sys
from pathlib import Path

# Deployed from the project root; make the cmlb package importable
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from firebase_functions import https_fn, options, scheduler_fn
from firebase_functions.params import SecretParam

from cmlb.context import build_context
from cmlb.dinner_suggestion import check_and_send_dinner_suggestion
from cmlb.lib.logging_config import setup_logging
from cmlb.proxy import handle_proxy_request

setup_logging()

# Create logger for this module
logger = logging.getLogger(__name__)

ANTHROPIC_API_KEY = SecretParam('ANTHROPIC_API_KEY')

# Secrets are exposed as environment variables when the instance starts,
# so the context is built once per instance here
context = build_context()


@https_fn.on_request(
    secrets=[ANTHROPIC_API_KEY],
    cors=options.CorsOptions(cors_origins='*', cors_methods=['post']),
)
def claude_proxy(req: https_fn.Request) -> https_fn.Response:
    """Receives {model, max_tokens, system, messages} and forwards it to Anthropic"""
    response, status = handle_proxy_request(req, context)
    response.status_code = status
    return response


@scheduler_fn.on_schedule(
    schedule='0 * * * *',
    timezone='America/New_York',
    secrets=[ANTHROPIC_API_KEY],
    memory=options.MemoryOption.MB_256,
    timeout_sec=60,
)
def send_dinner_suggestion(event: scheduler_fn.ScheduledEvent) -> None:
    """Top of every hour: send today's dinner suggestion if this is the configured hour"""
    try:
        outcome = check_and_send_dinner_suggestion(context)
        logger.info(f"[DinnerSuggestion] Run finished: {outcome.status} ({outcome.reason or outcome.date})")
    except Exception as e:
        logger.error(f"[DinnerSuggestion] Error in scheduled task: {e}", exc_info=True)
        raise
