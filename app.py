import logging
import os

from config import config
from flask import Flask, jsonify
from flask_cors import CORS
from flask_migrate import Migrate


def create_app(config_name=None, provider=None):
    """
    Application factory pattern

    Args:
        config_name: Key in config.config (default: FLASK_ENV or "development")
        provider: LLMProvider to use for translations. If None, one is created
                  from the LLM_* configuration values.
    """
    if config_name is None:
        config_name = os.getenv("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config[config_name])
    app.json.ensure_ascii = False

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format='%(levelname)s - %(name)s - %(message)s'
    )

    # Initialize CORS for browser clients
    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["ALLOWED_ORIGINS"]}},
    )

    # Initialize SQLAlchemy (survey document store)
    from models import db
    from models.survey import SurveyRecord

    db.init_app(app)

    # Initialize Flask-Migrate
    migrate = Migrate(app, db)

    # Translation service with an explicitly chosen LLM provider
    from services.llm_provider_factory import LLMProviderFactory
    from services.survey_translation_service import SurveyTranslationService

    if provider is None:
        provider_name = app.config["LLM_PROVIDER"]
        provider = LLMProviderFactory.create_provider(
            provider_name,
            api_key=app.config.get(f"{provider_name.upper()}_API_KEY"),
            model=app.config["LLM_MODEL"],
            temperature=app.config["LLM_TEMPERATURE"],
            max_tokens=app.config["LLM_MAX_TOKENS"],
            timeout=app.config["LLM_TIMEOUT_SECONDS"],
        )

    app.extensions["survey_translation"] = SurveyTranslationService(
        provider,
        max_workers=app.config["TRANSLATION_MAX_WORKERS"],
        async_max_workers=app.config["TRANSLATION_ASYNC_MAX_WORKERS"],
    )

    # Register API blueprints and error handlers
    from routes.errors import register_error_handlers
    from routes.translation import bp as translation_bp

    app.register_blueprint(translation_bp)
    register_error_handlers(app)

    # Home route
    @app.route("/")
    def home():
        return jsonify({"message": "Welcome to Survey Translator!", "version": "1.0.0"})

    # Health check route
    @app.route("/health")
    def health_check():
        provider_name = app.extensions["survey_translation"].provider.get_provider_name()
        try:
            db.session.execute(db.text("SELECT 1"))
            return jsonify({"status": "healthy", "database": "connected", "provider": provider_name}), 200
        except Exception as e:
            app.logger.error(f"Health check failed: {e}")
            return jsonify({"status": "unhealthy", "database": "disconnected", "provider": provider_name}), 500

    return app


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        from models import db
        db.create_all()
    app.run(debug=True, port=5001)
