"""Configuration management using Pydantic settings."""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class ExplorerConfig(BaseSettings):
    """Configuration for the explorer engine."""
    
    # Node RPC Settings
    rpc_host: str = Field(default="localhost", description="Node RPC host")
    rpc_port: int = Field(default=39940, description="Node RPC port")
    rpc_user: str = Field(default="rpcuser", description="Node RPC username")
    rpc_password: str = Field(default="rpcpassword", description="Node RPC password")
    rpc_timeout: int = Field(default=30, description="RPC timeout in seconds")
    
    # Database Settings
    db_host: str = Field(default="localhost", description="PostgreSQL host")
    db_port: int = Field(default=5432, description="PostgreSQL port")
    db_name: str = Field(default="explorerdb", description="Database name")
    db_user: str = Field(default="explorer", description="Database username")
    db_password: str = Field(default="explorer", description="Database password")
    db_url: Optional[str] = Field(default=None, description="Full SQLAlchemy URL, overrides db_* parts")
    db_pool_size: int = Field(default=10, description="Connection pool size")
    db_max_overflow: int = Field(default=20, description="Max pool overflow")
    
    # Price Feed Settings
    price_api_url: str = Field(
        default="https://api.coinpaprika.com/v1/tickers/advc-adventurecoin",
        description="External USD price ticker"
    )
    price_cache_seconds: int = Field(default=20 * 60, description="Price cache duration in seconds")
    price_timeout: int = Field(default=10, description="Price request timeout in seconds")
    
    # View Settings
    mempool_enrich_limit: int = Field(default=20, description="Mempool entries enriched per request")
    enrichment_workers: int = Field(default=4, description="Concurrent mempool enrichment chains")
    max_page_size: int = Field(default=100, description="Upper bound for page size")
    
    # Logging Settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json|text)")
    log_file: Optional[str] = Field(default=None, description="Log file path")
    
    # HTTP Adapter Settings
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"
    
    @property
    def rpc_url(self) -> str:
        """Generate node RPC URL (credentials are sent as basic auth)."""
        return f"http://{self.rpc_host}:{self.rpc_port}"
    
    @property
    def database_url(self) -> str:
        """Generate database URL."""
        if self.db_url:
            return self.db_url
        return f"postgresql://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"
