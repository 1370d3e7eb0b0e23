"""
Application Configuration
Add constants, secrets, env variables here
"""

from functools import lru_cache
import logging
import os
import json
from pathlib import Path
from pydantic import computed_field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from dotenv import load_dotenv

# Load .env file into os.environ so os.getenv() works correctly
# This must happen before Settings class is instantiated
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

_config_logger = logging.getLogger(__name__)


def get_secret(secret_name: str, region_name: str) -> dict:
    """
    Retrieve secrets from AWS Secrets Manager

    Args:
        secret_name: Name of the secret in Secrets Manager
        region_name: AWS region where secret is stored

    Returns:
        dict: Parsed secret value

    Raises:
        ClientError: If secret cannot be retrieved
    """
    session = boto3.session.Session()
    client = session.client(
        service_name='secretsmanager',
        region_name=region_name
    )
    get_secret_value_response = client.get_secret_value(
        SecretId=secret_name
    )
    # Parse and return the secret
    secret = get_secret_value_response['SecretString']
    return json.loads(
        secret.replace('\n', '')
    )


def default_cache_home() -> Path:
    """Per-user cache directory, honouring XDG_CACHE_HOME"""
    xdg_cache = os.getenv("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache)
    return Path.home() / ".cache"


# Define settings class for univeral access
class Settings(BaseSettings):
    APP_NAME: str = "file_storage_api"
    STORAGE_DB_FILENAME: str = "storage.db"
    LOG_LEVEL: str = "INFO"

    # Allow any origin unless told otherwise
    client_origin: str = "*"

    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # Cache for AWS Secrets Manager to avoid multiple API calls
    # Note: Must use PrivateAttr for Pydantic v2 private attributes
    _secret_cache: dict | None = PrivateAttr(default=None)

    def _get_config_value(
        self,
        env_var_name: str,
        secret_key_name: str | None = None,
        default: str | None = None
    ) -> str | None:
        """
        Get configuration value from environment variable or AWS Secrets Manager (with caching).

        Secrets Manager is only consulted when ENV_SECRETS names a secret.

        Args:
            env_var_name: Environment variable name to check first
            secret_key_name: Key name in AWS Secrets (defaults to env_var_name if not provided)
            default: Default value to return if not found in env or secrets

        Returns:
            Configuration value, or default value if not found
        """
        # 1. Check environment variable first
        env_value = os.getenv(env_var_name)
        if env_value:
            return env_value

        # 2. Try to get from AWS Secrets Manager with caching
        if secret_key_name is None:
            secret_key_name = env_var_name

        env_secret = os.getenv('ENV_SECRETS')
        if env_secret:
            if self._secret_cache is None:
                try:
                    self._secret_cache = get_secret(
                        env_secret, os.getenv("AWS_REGION", 'us-east-1')
                    )
                except (BotoCoreError, ClientError) as e:
                    _config_logger.warning(
                        "Could not read secret %s: %s", env_secret, e
                    )
                    self._secret_cache = {}

            secret_value = self._secret_cache.get(secret_key_name)
            if secret_value is not None:
                return secret_value

        # 3. Return default value if provided
        return default

    @computed_field
    @property
    def STORAGE_DIR(self) -> str:
        """Directory holding the database file"""
        return self._get_config_value(
            "STORAGE_DIR",
            default=str(default_cache_home() / self.APP_NAME)
        )

    # SQLAlchemy - Create db connection string
    @computed_field
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Build database URI from env or secrets, defaults to a SQLite file in STORAGE_DIR"""
        db_file = Path(self.STORAGE_DIR) / self.STORAGE_DB_FILENAME
        return self._get_config_value(
            "SQLALCHEMY_DATABASE_URI", default=f"sqlite:///{db_file}"
        )

    # Read environment variables from .env file, if it exists
    # extra='ignore' prevents validation errors from extra env vars
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Export settings
@lru_cache
def get_settings() -> Settings:
    """
    Get settings instance, cached for performance
    """
    return Settings()


if __name__ == "__main__":
    # To use in other modules
    # from core.config import get_settings
    print(get_settings().SQLALCHEMY_DATABASE_URI)
