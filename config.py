import os
from dataclasses import dataclass

from dotenv import load_dotenv

from errors import ConfigurationError

DEFAULT_GRAPHQL_URL = "https://api.github.com/graphql"
DEFAULT_REST_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 30


@dataclass(frozen=True)
class Config:
    """Credentials and endpoints handed to GitHubAPI at construction."""

    token: str
    username: str
    api_url: str = DEFAULT_GRAPHQL_URL
    rest_url: str = DEFAULT_REST_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, env_file=None):
        """
        Build a Config from the process environment.

        Values in the .env file override variables already set in the
        environment. GITHUB_TOKEN and GITHUB_USERNAME are required.
        """
        load_dotenv(dotenv_path=env_file, override=True)
        token = os.getenv("GITHUB_TOKEN", "").strip()
        username = os.getenv("GITHUB_USERNAME", "").strip()

        missing = [name for name, value in (("GITHUB_TOKEN", token), ("GITHUB_USERNAME", username)) if not value]
        if missing:
            raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

        timeout = os.getenv("GITHUB_TIMEOUT", "").strip()
        try:
            timeout = float(timeout) if timeout else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigurationError(f"GITHUB_TIMEOUT must be a number, got {timeout!r}")

        return cls(
            token=token,
            username=username,
            api_url=os.getenv("GITHUB_GRAPHQL_URL", "").strip() or DEFAULT_GRAPHQL_URL,
            rest_url=(os.getenv("GITHUB_API_URL", "").strip() or DEFAULT_REST_URL).rstrip("/"),
            timeout=timeout,
        )
