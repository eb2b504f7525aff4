"""Configuration handling for the Reddit API client."""

import os
from dataclasses import dataclass, field
from typing import List, Optional

import yaml
from dotenv import load_dotenv

DEFAULT_URL = "https://www.reddit.com"
DEFAULT_AUTHENTICATED_URL = "https://oauth.reddit.com"
DEFAULT_USER_AGENT = "python:reddit_api:v0.1.0"
ACCESS_TOKEN_PATH = "api/v1/access_token"


@dataclass
class RetryConfig:
    """Retry policy for single requests. Disabled when ``max_retries`` is 0."""

    max_retries: int = 0
    initial_backoff: float = 1.0
    max_backoff: float = 32.0
    backoff_factor: float = 2.0
    failure_threshold: int = 5


@dataclass
class RateLimitConfig:
    """Rate limiting configuration."""

    enabled: bool = False
    max_requests_per_minute: int = 100
    min_remaining_calls: int = 5
    sleep_buffer_sec: int = 2


@dataclass
class MonitoringConfig:
    """Monitoring configuration."""

    enable_prometheus: bool = False
    prometheus_port: int = 8000


@dataclass
class Config:
    """Client configuration combining environment variables and YAML config."""

    # Reddit API credentials
    user_agent: str = DEFAULT_USER_AGENT
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    access_token: Optional[str] = None

    # Endpoint roots; base_url is switched to authenticated_url after a token exchange
    base_url: str = DEFAULT_URL
    public_url: str = DEFAULT_URL
    authenticated_url: str = DEFAULT_AUTHENTICATED_URL

    timeout: float = 30.0
    retry: RetryConfig = field(default_factory=RetryConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)

    @property
    def read_only(self) -> bool:
        """True when no application credentials are configured."""
        return self.client_id is None and self.client_secret is None

    @property
    def token_url(self) -> str:
        return f"{self.public_url}/{ACCESS_TOKEN_PATH}"

    @classmethod
    def from_env(cls, env_path: Optional[str] = None) -> "Config":
        """
        Load credentials from environment variables.

        Expected variables (all optional):
        - REDDIT_CLIENT_ID
        - REDDIT_CLIENT_SECRET
        - REDDIT_USERNAME
        - REDDIT_PASSWORD
        - REDDIT_USER_AGENT

        Args:
            env_path: Optional path to .env file (defaults to .env in current directory)

        Returns:
            Config instance populated from the environment
        """
        if env_path:
            load_dotenv(env_path)
        else:
            load_dotenv()

        config = cls()
        # Empty variables count as unset so read-only mode stays reachable
        config.client_id = os.getenv("REDDIT_CLIENT_ID") or None
        config.client_secret = os.getenv("REDDIT_CLIENT_SECRET") or None
        config.username = os.getenv("REDDIT_USERNAME") or None
        config.password = os.getenv("REDDIT_PASSWORD") or None
        config.user_agent = os.getenv("REDDIT_USER_AGENT") or DEFAULT_USER_AGENT
        return config

    @classmethod
    def from_files(cls, config_path: str, env_path: Optional[str] = None) -> "Config":
        """
        Load configuration from YAML file and environment variables.

        Credentials only ever come from the environment; the YAML file
        carries tuning values (user agent, timeout, retry, rate limit,
        monitoring).

        Args:
            config_path: Path to YAML configuration file
            env_path: Optional path to .env file (defaults to .env in current directory)

        Returns:
            Config instance with merged configuration
        """
        config = cls.from_env(env_path)

        if not os.path.exists(config_path):
            return config

        with open(config_path, "r", encoding="utf-8") as file:
            yaml_config = yaml.safe_load(file)

        if not yaml_config:
            return config

        nested = {
            "retry": RetryConfig,
            "rate_limit": RateLimitConfig,
            "monitoring": MonitoringConfig,
        }

        for key, value in yaml_config.items():
            if key in nested:
                if isinstance(value, dict):
                    section = nested[key]()
                    for sub_key, sub_value in value.items():
                        if hasattr(section, sub_key):
                            setattr(section, sub_key, sub_value)
                    setattr(config, key, section)
            elif key in ("user_agent", "timeout", "public_url", "authenticated_url"):
                setattr(config, key, value)

        config.base_url = config.public_url
        return config

    def validate(self) -> List[str]:
        """
        Validate configuration and return a list of validation errors.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not self.user_agent:
            errors.append("user_agent must not be empty")

        # Application credentials come as a pair or not at all
        if (self.client_id is None) != (self.client_secret is None):
            errors.append("REDDIT_CLIENT_ID and REDDIT_CLIENT_SECRET must be set together")

        if (self.username is None) != (self.password is None):
            errors.append("REDDIT_USERNAME and REDDIT_PASSWORD must be set together")

        if self.username is not None and self.read_only:
            errors.append("Password login requires REDDIT_CLIENT_ID and REDDIT_CLIENT_SECRET")

        if self.timeout <= 0:
            errors.append("timeout must be greater than 0")

        if self.retry.max_retries < 0:
            errors.append("retry.max_retries must not be negative")

        if self.retry.failure_threshold <= 0:
            errors.append("retry.failure_threshold must be greater than 0")

        if self.rate_limit.max_requests_per_minute <= 0:
            errors.append("rate_limit.max_requests_per_minute must be greater than 0")

        return errors
