"""
Configuration management for the member portal.
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _csv(value: str) -> list:
    return [item.strip() for item in value.split(',') if item.strip()]


class BaseConfig:
    """Base configuration."""
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Auth tokens
    JWT_ALGORITHM = 'HS256'
    JWT_EXPIRES_HOURS = int(os.getenv('JWT_EXPIRES_HOURS', '24'))
    MIN_PASSWORD_LENGTH = 6

    # Transactional email
    EMAIL_PROVIDER = os.getenv('EMAIL_PROVIDER', 'brevo')  # brevo or sendgrid
    BREVO_API_KEY = os.getenv('BREVO_API_KEY', '')
    SENDGRID_API_KEY = os.getenv('SENDGRID_API_KEY', '')
    EMAIL_SENDER_EMAIL = os.getenv('EMAIL_SENDER_EMAIL', 'brematech27@gmail.com')
    EMAIL_SENDER_NAME = os.getenv('EMAIL_SENDER_NAME', 'DTCE ICT Department')
    EMAIL_TIMEOUT = int(os.getenv('EMAIL_TIMEOUT', '15'))

    # Organization names used in greetings and email footers
    ORGANIZATION_DEPARTMENT = os.getenv('ORGANIZATION_DEPARTMENT', 'DTCE ICT Department')
    ORGANIZATION_DIRECTORATE = os.getenv(
        'ORGANIZATION_DIRECTORATE', 'Directorate of Teens & Children Education'
    )
    ORGANIZATION_CHURCH = os.getenv(
        'ORGANIZATION_CHURCH', 'Redeemed Christian Church of God (RCCG)'
    )

    # Profile picture uploads
    UPLOAD_FOLDER = os.getenv(
        'UPLOAD_FOLDER',
        os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'uploads')
    )
    MAX_UPLOAD_BYTES = int(os.getenv('MAX_UPLOAD_BYTES', str(5 * 1024 * 1024)))

    CORS_ORIGINS = _csv(os.getenv('CORS_ORIGINS', 'http://localhost:3000,http://127.0.0.1:3000'))

    # Birthday job
    CRON_SECRET = os.getenv('CRON_SECRET', '')
    ENABLE_SCHEDULER = os.getenv('ENABLE_SCHEDULER') == 'true'
    BIRTHDAY_JOB_HOUR = int(os.getenv('BIRTHDAY_JOB_HOUR', '7'))
    UPCOMING_BIRTHDAY_DAYS = 30
    RECENT_POSTS_LIMIT = 10


class DevelopmentConfig(BaseConfig):
    """Development configuration."""
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv(
        'DATABASE_URL',
        'sqlite:///portal_dev.db'  # SQLite fallback for local dev
    )


class ProductionConfig(BaseConfig):
    """Production configuration."""
    DEBUG = False

    _db_url = os.getenv('DATABASE_URL', '')
    if _db_url.startswith('postgres://'):
        # SQLAlchemy requires postgresql:// not postgres://
        _db_url = _db_url.replace('postgres://', 'postgresql://', 1)

    SQLALCHEMY_DATABASE_URI = _db_url

    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': 5,
        'pool_recycle': 300,
        'pool_pre_ping': True,  # Verify connections before using
    }

    _secret_key = os.getenv('SECRET_KEY', '')

    @classmethod
    def validate_secret_key(cls) -> str:
        """
        Validate SECRET_KEY in production environment.

        Raises:
            RuntimeError: If SECRET_KEY is missing, empty, or contains unsafe values
        """
        if not cls._secret_key:
            raise RuntimeError(
                "CRITICAL: SECRET_KEY environment variable is not set!\n"
                "Generate one with: python -c \"import secrets; print(secrets.token_hex(32))\""
            )

        insecure_patterns = ['dev', 'change', 'default', 'test', 'secret', 'password']
        lower_key = cls._secret_key.lower()
        for pattern in insecure_patterns:
            if pattern in lower_key:
                raise RuntimeError(
                    f"CRITICAL: SECRET_KEY contains '{pattern}' which suggests it's not secure!"
                )

        if len(cls._secret_key) < 32:
            raise RuntimeError(
                "CRITICAL: SECRET_KEY is too short (minimum 32 characters required)!"
            )

        return cls._secret_key

    SECRET_KEY = _secret_key  # Validated at app startup


class TestingConfig(BaseConfig):
    """Testing configuration."""
    TESTING = True
    SECRET_KEY = 'testing-secret-key-for-portal-tokens'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    EMAIL_PROVIDER = 'brevo'
    BREVO_API_KEY = 'test-brevo-key'
    CRON_SECRET = 'test-cron-secret'
    ENABLE_SCHEDULER = False


config_map = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig
}


def get_config(config_name: str = 'development'):
    """Get configuration class by name."""
    return config_map.get(config_name, DevelopmentConfig)


def validate_config(config_name: str = 'development') -> None:
    """
    Validate configuration before app startup.

    Raises:
        RuntimeError: If validation fails in production
    """
    if config_name == 'production':
        ProductionConfig.validate_secret_key()
