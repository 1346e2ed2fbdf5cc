"""Flask application factory for printdesk."""

import logging
import os

from dotenv import load_dotenv
from flask import Flask
from flask_migrate import Migrate

from .config import config
from .models import db

migrate = Migrate()


def create_app(config_name: str | None = None, overrides: dict | None = None) -> Flask:
    """Create and configure the Flask application.
    
    Args:
        config_name: Configuration name ('development', 'production', 'testing').
                    Defaults to FLASK_CONFIG, FLASK_ENV or 'development'.
        overrides: Extra config values applied after the config class.
    
    Returns:
        Configured Flask application instance.
    """
    # Load environment variables from .env file
    load_dotenv()
    
    if config_name is None:
        config_name = os.environ.get("FLASK_CONFIG") or os.environ.get("FLASK_ENV", "development")
    
    app = Flask(__name__)
    
    # Load configuration
    app_config = config.get(config_name, config["default"])
    app.config.from_object(app_config)
    if overrides:
        app.config.update(overrides)
    app_config.init_app(app)
    
    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    
    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    
    from .errors import register_error_handlers
    register_error_handlers(app)
    
    # Initialize retention sweeper
    from .services.retention import retention_sweeper
    retention_sweeper.init_app(app)
    
    # Register blueprints
    from .routes import auth_bp, jobs_bp
    
    app.register_blueprint(auth_bp)
    app.register_blueprint(jobs_bp)
    
    from .cli import register_commands
    register_commands(app)
    
    # Health check endpoint
    @app.route("/health")
    def health():
        return {"status": "ok"}
    
    return app
