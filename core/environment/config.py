import os
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings using Pydantic Settings.

    Attributes
    ----------
    redis_host : str
        Redis host backing the key-value registry
    redis_port : int
        Redis port
    redis_db : int
        Redis database number
    redis_password : str
        Redis password (optional)
    kv_namespace : str
        Prefix for every registry key stored in Redis
    log_level : str
        Root logging level
    rpc_retry_attempts : int
        Maximum attempts for critical RPC reads
    rpc_retry_base_delay : float
        Delay in seconds before the first retry
    rpc_retry_multiplier : float
        Backoff multiplier applied on every further retry
    receipt_timeout : float
        Seconds to wait for a transfer receipt
    """

    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: str = ""

    kv_namespace: str = "wallet"
    log_level: str = "INFO"

    rpc_retry_attempts: int = 3
    rpc_retry_base_delay: float = 1.0
    rpc_retry_multiplier: float = 2.0

    receipt_timeout: float = 120.0

    model_config = SettingsConfigDict(
        env_file=os.getenv("ENV_FILE", ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False
    )
