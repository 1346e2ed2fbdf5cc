"""Configuration module for printdesk."""

import os
from pathlib import Path


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


class Config:
    """Base configuration."""
    
    # Flask
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key-change-me")
    DEBUG = _env_flag("FLASK_DEBUG")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    
    # Session cookie
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = False
    
    # File uploads
    UPLOAD_FOLDER = Path(os.environ.get("UPLOAD_FOLDER", "./uploads")).resolve()
    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_CONTENT_LENGTH", 52428800))  # 50MB per request
    MAX_FILE_SIZE = int(os.environ.get("MAX_FILE_SIZE", 10485760))  # 10MB per file
    MAX_COPIES = int(os.environ.get("MAX_COPIES", 99))
    
    # Document types the shop expects. Only enforced when ENFORCE_ALLOWED_TYPES is set,
    # otherwise other types are accepted and logged.
    ALLOWED_MIMETYPES = {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-powerpoint",
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    }
    ENFORCE_ALLOWED_TYPES = _env_flag("ENFORCE_ALLOWED_TYPES")
    
    # Database configuration
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///./printdesk.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    
    # Retention settings
    RETENTION_MAX_AGE_MINUTES = int(os.environ.get("RETENTION_MAX_AGE_MINUTES", 60))
    SWEEP_INTERVAL_MINUTES = float(os.environ.get("SWEEP_INTERVAL_MINUTES", 15))
    RETENTION_SWEEPER_ENABLED = _env_flag("RETENTION_SWEEPER_ENABLED", "true")
    
    # Operator accounts created by `flask seed-operators`, as "user:password;user2:password2"
    SEED_OPERATORS = os.environ.get("SEED_OPERATORS", "")
    
    @classmethod
    def init_app(cls, app):
        """Initialize application with this config."""
        # Ensure upload folder exists
        Path(app.config["UPLOAD_FOLDER"]).mkdir(parents=True, exist_ok=True)


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    SESSION_COOKIE_SECURE = True


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    RETENTION_SWEEPER_ENABLED = False
    SEED_OPERATORS = ""


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
