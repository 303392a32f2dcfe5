"""Application settings and configuration."""
import os
from pathlib import Path
from dotenv import load_dotenv

ENV_PATH = Path(__file__).resolve().parent / '.env'
load_dotenv(dotenv_path=ENV_PATH)


def _int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


class Settings:
    """
    ─── UPSTREAM LIMITS ──────────────────────────────────────────────────
    The PUBG API grants 10 requests / minute per key. Telemetry lives on a
    CDN but still goes through the same limiter so nothing can burst past
    the quota. We stay below the documented limit to absorb clock skew.
    ──────────────────────────────────────────────────────────────────────
    """

    PUBG_API_KEY:      str = os.getenv('PUBG_API_KEY', '')
    PUBG_API_BASE_URL: str = os.getenv('PUBG_API_BASE_URL', 'https://api.pubg.com')
    DEFAULT_PLATFORM:  str = os.getenv('PUBG_DEFAULT_PLATFORM', 'steam')

    # ── Rate limit ─────────────────────────────────────────────────────────
    REQUESTS_PER_MINUTE:   int   = _int('PUBG_REQUESTS_PER_MINUTE', 9)
    # 0 → derive from the quota (60 / REQUESTS_PER_MINUTE)
    MIN_REQUEST_INTERVAL:  float = _float('PUBG_MIN_REQUEST_INTERVAL', 0.0)
    LOW_REMAINING_THRESHOLD: int = 3
    LOW_REMAINING_INTERVAL:  float = 15.0

    # ── HTTP ───────────────────────────────────────────────────────────────
    REQUEST_TIMEOUT:    float = _float('PUBG_REQUEST_TIMEOUT', 15.0)
    TELEMETRY_TIMEOUT:  float = _float('PUBG_TELEMETRY_TIMEOUT', 45.0)
    MAX_RETRIES:        int   = _int('PUBG_MAX_RETRIES', 2)
    RETRY_BACKOFF_BASE: float = _float('PUBG_RETRY_BACKOFF_BASE', 2.0)
    RETRY_BACKOFF:      float = 2.0
    RATE_LIMIT_BACKOFF: float = 3.0
    RATE_LIMIT_FALLBACK_WAIT: float = _float('PUBG_RATE_LIMIT_FALLBACK_WAIT', 10.0)

    # ── Cache ──────────────────────────────────────────────────────────────
    CACHE_ENABLED:       bool = os.getenv('PUBG_CACHE_ENABLED', 'true').strip().lower() == 'true'
    PLAYER_CACHE_TTL:    int  = _int('PUBG_PLAYER_CACHE_TTL', 3600)       # 1 hour
    MATCH_CACHE_TTL:     int  = _int('PUBG_MATCH_CACHE_TTL', 604800)      # 1 week
    TELEMETRY_CACHE_TTL: int  = _int('PUBG_TELEMETRY_CACHE_TTL', 604800)

    # ── Search ─────────────────────────────────────────────────────────────
    MAX_MATCHES_PER_PLAYER: int = _int('PUBG_MAX_MATCHES_PER_PLAYER', 5)
    MAX_ROSTER_PLAYERS:     int = _int('PUBG_MAX_ROSTER_PLAYERS', 5)
    MAX_PLAYER_NAME_LENGTH: int = 30

    # ── Paths ──────────────────────────────────────────────────────────────
    BASE_DIR:  Path = Path(__file__).resolve().parent.parent
    DATA_DIR:  Path = BASE_DIR / 'data'
    CACHE_DIR: Path = Path(os.getenv('PUBG_CACHE_DIR', str(DATA_DIR / 'cache')))
    LOG_DIR:   Path = DATA_DIR / 'logs'

    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')

    @classmethod
    def min_request_interval(cls) -> float:
        if cls.MIN_REQUEST_INTERVAL > 0:
            return cls.MIN_REQUEST_INTERVAL
        return 60.0 / max(1, cls.REQUESTS_PER_MINUTE)

    @classmethod
    def validate(cls) -> None:
        if not cls.PUBG_API_KEY:
            raise ValueError("PUBG_API_KEY must be set in config/.env")

    @classmethod
    def create_directories(cls) -> None:
        cls.CACHE_DIR.mkdir(parents=True, exist_ok=True)
        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)


settings = Settings()
