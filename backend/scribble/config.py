import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Logging
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Storage (defaults to in-memory when REDIS_URL is empty)
    REDIS_URL = os.environ.get("REDIS_URL", "")
    REDIS_TIMEOUT_SEC = float(os.environ.get("REDIS_TIMEOUT_SEC", "2"))

    # Game
    TOTAL_ROUNDS = int(os.environ.get("TOTAL_ROUNDS", "3"))
    DRAW_DURATION_SEC = int(os.environ.get("DRAW_DURATION_SEC", "60"))
    CHOOSE_DURATION_SEC = int(os.environ.get("CHOOSE_DURATION_SEC", "15"))
    WORD_CHOICES_COUNT = int(os.environ.get("WORD_CHOICES_COUNT", "3"))
