import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-key")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    TEMPLATES_AUTO_RELOAD = True

    # base64 photos travel inside the JSON body
    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_CONTENT_LENGTH", 20 * 1024 * 1024))

    # seconds to wait on a locked store before giving up
    STORE_TIMEOUT = float(os.environ.get("STORE_TIMEOUT", 5))

    CORS_ORIGIN = os.environ.get("CORS_ORIGIN", "*")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    PORT = int(os.environ.get("PORT", 4000))

    # used by the client package
    API_BASE = os.environ.get("API_BASE", "http://localhost:4000")
    LOCAL_CACHE_PATH = os.environ.get("LOCAL_CACHE_PATH", "sb_members_v1.json")
