#!/usr/bin/env python3
"""
Scheduled jobs routes for Cloud Scheduler
These endpoints let Cloud Scheduler (or a developer) trigger the hourly job over HTTP.
"""

import logging
from flask import Blueprint, current_app, jsonify

from ..dinner_suggestion import check_and_send_dinner_suggestion

# Create logger for this module
logger = logging.getLogger(__name__)

bp = Blueprint('scheduled_jobs', __name__)


@bp.route('/scheduled/dinner-suggestion', methods=['GET', 'POST'])
def scheduled_dinner_suggestion():
    """
    Run the hourly dinner suggestion check.
    The job decides on its own whether this hour is the configured one.
    """
    logger.info("[DinnerSuggestion] /scheduled/dinner-suggestion endpoint called")
    try:
        outcome = check_and_send_dinner_suggestion(current_app.config['APP_CONTEXT'])
        return jsonify({'status': 'success', 'outcome': outcome.to_dict()}), 200
    except Exception as e:
        logger.error(f"[DinnerSuggestion] Error in scheduled task: {e}", exc_info=True)
        return jsonify({
            'status': 'error',
            'message': str(e)
        }), 500
