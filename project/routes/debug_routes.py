"""Administrator routes: login, theme registration, diagnostics and settings."""
import logging
from flask import Blueprint, current_app, request, jsonify

from config.settings import OPENAI_BASE_URL
from models.question import QUESTION_ATTRIBUTES
from services.ai_service import AIService
from services.host_session import admin_login, admin_logout, admin_required
from services.plugin_settings import get_plugin_settings
from services.theme_registry import registry_from_config

logger = logging.getLogger(__name__)

debug_bp = Blueprint('debug', __name__)


@debug_bp.route('/api/admin/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    if not admin_login(str(data.get("token") or "")):
        return jsonify({"error": "Unauthorized"}), 403
    return jsonify({"ok": True}), 200


@debug_bp.route('/api/admin/logout', methods=['POST'])
def logout():
    admin_logout()
    return jsonify({"ok": True}), 200


@debug_bp.route('/api/admin/reinstall', methods=['GET', 'POST'])
@admin_required
def reinstall():
    """Force re-registration of the question theme."""
    try:
        report = registry_from_config(current_app.config).reinstall_report()
    except OSError as e:
        logger.error("[THEME] reinstall failed: %s", e)
        return jsonify({"error": f"Theme installation failed: {e}"}), 500
    return jsonify(report), 200


@debug_bp.route('/api/admin/debug', methods=['GET'])
@admin_required
def debug():
    """Diagnostic information about the theme registration."""
    return jsonify(registry_from_config(current_app.config).diagnostics()), 200


@debug_bp.route('/api/admin/ping', methods=['GET'])
@admin_required
def ping():
    """Check reachability and configuration without calling the model."""
    settings = get_plugin_settings()
    registry = registry_from_config(current_app.config)
    base_url = current_app.config.get("OPENAI_BASE_URL") or OPENAI_BASE_URL
    return jsonify({
        "ok": True,
        "api_key_configured": bool(settings.api_key),
        "model": settings.model,
        "provider": settings.provider,
        "upstream_url": AIService.endpoint_url(settings.provider, base_url),
        "timeout_sec": current_app.config.get("UPSTREAM_TIMEOUT_SEC"),
        "theme_registered": registry.is_registered(),
    }), 200


@debug_bp.route('/api/admin/settings', methods=['GET', 'POST'])
@admin_required
def plugin_settings():
    settings = get_plugin_settings()
    if request.method == 'GET':
        return jsonify(settings.public()), 200
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        return jsonify({"error": "Invalid JSON body"}), 400
    try:
        return jsonify(settings.update(data)), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400


@debug_bp.route('/api/admin/question_attributes', methods=['GET'])
@admin_required
def question_attributes():
    return jsonify(QUESTION_ATTRIBUTES), 200
