#!/usr/bin/env python3
"""
Chat proxy route for the local Flask app
"""

from flask import Blueprint, current_app, request

from ..proxy import handle_proxy_request

bp = Blueprint('proxy', __name__)


@bp.route('/api/claude', methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE'])
def claude_proxy():
    """Same behaviour as the deployed claude_proxy function"""
    return handle_proxy_request(request, current_app.config['APP_CONTEXT'])
