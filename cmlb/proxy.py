#!/usr/bin/env python3
"""
Chat proxy: relays Messages API requests from the recipe app to Anthropic,
keeping the API key on the server.
"""

import logging

from flask import jsonify

from .context import AppContext

# Create logger for this module
logger = logging.getLogger(__name__)

FORWARDED_FIELDS = ('model', 'max_tokens', 'system', 'messages')


def build_forward_payload(body):
    """Pick the forwarded fields out of the request body; absent ones stay absent"""
    body = body or {}
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return {name: body[name] for name in FORWARDED_FIELDS if name in body}


def handle_proxy_request(request, context: AppContext):
    """
    Handle one proxy request.

    Args:
        request: flask.Request (also what firebase_functions passes to on_request handlers)
        context: App context holding the chat client

    Returns:
        (flask.Response, status)
    """
    if request.method != 'POST':
        return jsonify({'error': 'Method not allowed'}), 405

    try:
        body = request.get_json(force=True) if request.get_data() else {}
        payload = build_forward_payload(body)
        data = context.chat_completer.forward(payload)
        return jsonify(data), 200
    except Exception as e:
        logger.error(f"[Proxy] claude_proxy error: {e}", exc_info=True)
        return jsonify({'error': str(e)}), 500
