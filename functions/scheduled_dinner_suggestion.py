"""
Cloud Function for the dinner suggestion job
Triggered over HTTP by Cloud Scheduler (alternative to the scheduler_fn deployment)
"""

import logging
import sys
from pathlib import Path

# Add parent directory to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from functions_framework import http

from cmlb.context import build_context
from cmlb.dinner_suggestion import check_and_send_dinner_suggestion
from cmlb.lib.logging_config import setup_logging

setup_logging()

logger = logging.getLogger(__name__)

context = build_context()


@http
def scheduled_dinner_suggestion(request):
    """Cloud Function triggered by Cloud Scheduler every hour"""
    try:
        outcome = check_and_send_dinner_suggestion(context)
        return {'status': 'success', 'outcome': outcome.to_dict()}, 200
    except Exception as e:
        logger.error(f"[DinnerSuggestion] Error in scheduled task: {e}", exc_info=True)
        return {'status': 'error', 'message': str(e)}, 500
