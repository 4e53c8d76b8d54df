from typing import Union
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Root of the redinsight package, used to locate bundled assets
PACKAGE_ROOT_DIR = Path(__file__).parent.parent.resolve()
# Path to the repository root (one level above the package)
PROJECT_ROOT_DIR = PACKAGE_ROOT_DIR.parent


class Settings(BaseSettings):
    # Application settings
    APP_NAME: str = "RedInsight"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Upstream (Reddit) settings
    UPSTREAM_BASE_URL: str = "https://www.reddit.com"
    UPSTREAM_USER_AGENT: str = "RedInsight/1.0 (Educational Project)"
    UPSTREAM_TIMEOUT_SECONDS: float = 10.0
    PROXY_PREFIX: str = "/api/reddit"

    # CORS settings
    CORS_ORIGINS: Union[str, list[str]] = "*"
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: Union[str, list[str]] = "GET,POST,PUT,DELETE,OPTIONS"
    CORS_ALLOW_HEADERS: Union[str, list[str]] = "Origin,X-Requested-With,Content-Type,Accept"

    # Static UI assets
    STATIC_DIR: str = str(PACKAGE_ROOT_DIR / "static")

    # Viewer settings
    DEFAULT_PAGE_SIZE: int = 25
    MAX_COMMENTS: int = 10
    DEBOUNCE_SECONDS: float = 0.5
    DEFAULT_ICON_URL: str = "https://www.redditstatic.com/desktop2x/img/favicon/android-icon-192x192.png"

    # Logging configuration path (can be overridden by env var)
    LOGGING_CONFIG_PATH: str = str(PACKAGE_ROOT_DIR / "config" / "logging_config.yaml")
    LOG_LEVEL: str = "INFO"

    def model_post_init(self, __context) -> None:
        """Parse comma-separated strings into lists after model initialization."""
        if isinstance(self.CORS_ORIGINS, str):
            self.CORS_ORIGINS = [origin.strip() for origin in self.CORS_ORIGINS.split(',') if origin.strip()]

        if isinstance(self.CORS_ALLOW_METHODS, str):
            self.CORS_ALLOW_METHODS = [method.strip() for method in self.CORS_ALLOW_METHODS.split(',') if method.strip()]

        if isinstance(self.CORS_ALLOW_HEADERS, str):
            if self.CORS_ALLOW_HEADERS == "*":
                self.CORS_ALLOW_HEADERS = ["*"]
            else:
                self.CORS_ALLOW_HEADERS = [header.strip() for header in self.CORS_ALLOW_HEADERS.split(',') if header.strip()]

    @property
    def upstream_headers(self) -> dict[str, str]:
        """Headers attached to every request forwarded to Reddit."""
        return {
            "User-Agent": self.UPSTREAM_USER_AGENT,
            "Accept": "application/json",
        }

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT_DIR / ".env"),
        env_file_encoding='utf-8',
        extra='ignore'
    )


# Instantiate settings
settings = Settings()
