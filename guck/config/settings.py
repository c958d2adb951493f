from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every field can be set with a ``GUCK_`` prefixed environment variable
    (for example ``GUCK_BASE_BRANCH=develop``) or in a ``.env`` file in the
    directory the server is started from.
    """

    model_config = SettingsConfigDict(env_prefix="GUCK_", env_file=".env", extra="ignore")

    # Repository under review and how it is compared
    REPO_PATH: str = "."
    BASE_BRANCH: str = "main"
    DIFF_MODE: str = "branch"  # branch, working or staged
    DIFF_TIMEOUT: int = 60  # Seconds per diff computation, 0 disables the limit

    # Development and debugging
    DEBUG: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
