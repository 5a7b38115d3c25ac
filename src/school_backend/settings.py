import os
import threading

class BackendSettings:
    _instance = None
    _lock = threading.Lock()

    def __init__(self):
        self.DEBUG_MODE = os.environ.get("DEBUG_MODE","development")
        self.LOG_LEVEL = os.environ.get("LOG_LEVEL","INFO")

        # Database
        self.DATABASE_URL = os.environ.get("DATABASE_URL", None)
        self.POSTGRES_URL = os.environ.get("POSTGRES_URL","localhost:5432")
        self.POSTGRES_USER = os.environ.get("POSTGRES_USER","postgres")
        self.POSTGRES_PASSWORD = os.environ.get("POSTGRES_PASSWORD","postgres")
        self.POSTGRES_DB = os.environ.get("POSTGRES_DB","school")

        # Authentication settings
        self.TOKEN_SECRET = os.environ.get("TOKEN_SECRET", None)  # keycove key for stored passwords
        self.JWT_SECRET = os.environ.get("JWT_SECRET", None)
        self.JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
        self.JWT_EXPIRE_HOURS = int(os.environ.get("JWT_EXPIRE_HOURS", "24"))

        # Cache
        self.REDIS_HOST = os.environ.get("REDIS_HOST", None)
        self.REDIS_PORT = int(os.environ.get("REDIS_PORT", "6379"))
        self.REDIS_PASSWORD = os.environ.get("REDIS_PASSWORD", "")

        self.CORS_ORIGINS = [origin.strip() for origin in os.environ.get("CORS_ORIGINS", "*").split(",") if origin.strip()]

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(BackendSettings, cls).__new__(cls)
        return cls._instance

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_URL}/{self.POSTGRES_DB}"

    @property
    def jwt_secret(self) -> str:
        if not self.JWT_SECRET:
            raise RuntimeError("JWT_SECRET is not set")
        return self.JWT_SECRET

settings = BackendSettings()
