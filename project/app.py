import logging
from flask import Flask, jsonify
from flask_cors import CORS

from config import settings
from models.survey import SurveyCatalog
from routes.chat_routes import chat_bp
from routes.debug_routes import debug_bp
from routes.survey_routes import survey_bp
from services.theme_registry import registry_from_config

logger = logging.getLogger(__name__)


def create_app(overrides: dict = None) -> Flask:
    app = Flask(__name__, static_url_path="/static", static_folder="static")
    app.config.from_object(settings)
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings.validate_config(app.config)

    # The widget may be embedded in survey pages served from another origin
    CORS(app, resources={r"/api/*": {"origins": "*"}, r"/plugins/*": {"origins": "*"}})

    # Register blueprints
    app.register_blueprint(chat_bp)
    app.register_blueprint(debug_bp)
    app.register_blueprint(survey_bp)

    app.extensions["survey_catalog"] = SurveyCatalog.load(app.config.get("SURVEYS_PATH"))

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    if app.config.get("THEME_AUTO_INSTALL"):
        registry = registry_from_config(app.config)
        try:
            if not registry.is_registered():
                registry.install()
        except (OSError, ValueError) as e:
            logger.error("[THEME] automatic install failed: %s", e)

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host=app.config["HOST"], port=app.config["PORT"], debug=False)
