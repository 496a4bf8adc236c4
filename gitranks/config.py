import os
from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


class Config:
    """Service configuration settings"""

    # GitHub settings
    GITHUB_TOKEN = os.getenv('GITHUB_TOKEN') or None
    GITHUB_API_URL = os.getenv('GITHUB_API_URL', 'https://api.github.com').rstrip('/')
    GITHUB_GRAPHQL_URL = os.getenv('GITHUB_GRAPHQL_URL', f"{GITHUB_API_URL}/graphql")
    USER_AGENT = os.getenv('USER_AGENT', 'gitranks-app')
    REQUEST_TIMEOUT = float(os.getenv('REQUEST_TIMEOUT', '20'))

    # Server settings
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = _env_int('PORT', 8000)
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'

    # Logging settings
    LOG_TO_FILE = os.getenv('LOG_TO_FILE', 'False').lower() == 'true'
    LOG_DIR = os.getenv('LOG_DIR', 'logs')

    # Inbound throttle (requests per window per client, 0 disables)
    INBOUND_RATE_LIMIT = _env_int('INBOUND_RATE_LIMIT', 30)
    INBOUND_RATE_WINDOW = _env_int('INBOUND_RATE_WINDOW', 60)

    @classmethod
    def has_token(cls) -> bool:
        """True when a GitHub token is configured (enables GraphQL batching)"""
        return bool(cls.GITHUB_TOKEN)

    @classmethod
    def validate(cls):
        """Validate that configuration values are usable"""
        if cls.REQUEST_TIMEOUT <= 0:
            raise ValueError("REQUEST_TIMEOUT must be positive")
        if not 0 < cls.PORT < 65536:
            raise ValueError("PORT must be between 1 and 65535")
        if cls.INBOUND_RATE_LIMIT < 0 or cls.INBOUND_RATE_WINDOW <= 0:
            raise ValueError("INBOUND_RATE_LIMIT must be >= 0 and INBOUND_RATE_WINDOW must be positive")
