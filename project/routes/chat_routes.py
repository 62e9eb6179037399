"""Chat proxy API routes (the upstream API key never leaves the server)."""
import logging
from flask import Blueprint, request, jsonify

from services.chat_proxy import handle_chat
from services.errors import ChatProxyError
from routes import debug_routes

logger = logging.getLogger(__name__)

chat_bp = Blueprint('chat', __name__)

PLUGIN_NAME = "AIInterview"


@chat_bp.after_request
def no_store(response):
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
    response.headers["Pragma"] = "no-cache"
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


@chat_bp.route('/api/chat', methods=['POST'])
def chat():
    """Proxy one widget conversation turn to the chat-completion API."""
    body = request.get_json(silent=True)
    try:
        result = handle_chat(body)
    except ChatProxyError as e:
        logger.info("[CHAT] %s: %s", e.status_code, e)
        return jsonify({"error": str(e)}), e.status_code
    except Exception:
        logger.exception("[CHAT] unhandled error")
        return jsonify({"error": "Internal server error"}), 500
    return jsonify(result.to_response()), 200


@chat_bp.route('/plugins/direct', methods=['GET', 'POST'])
def direct_request():
    """Host-plugin style dispatcher: /plugins/direct?plugin=AIInterview&function=chat"""
    plugin = request.args.get("plugin", "")
    function = request.args.get("function", "")
    handlers = {
        "chat": chat,
        "reinstall": debug_routes.reinstall,
        "debug": debug_routes.debug,
        "ping": debug_routes.ping,
    }
    if plugin != PLUGIN_NAME or function not in handlers:
        return jsonify({"error": f"Unknown plugin function: {plugin}/{function}"}), 404
    if function == "chat" and request.method != "POST":
        return jsonify({"error": "Method not allowed"}), 405
    return handlers[function]()
