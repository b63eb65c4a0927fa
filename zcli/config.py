from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from typing import Optional

CONFIG_FILE_NAME = ".zcli-config.json"

class Settings(BaseSettings):
    """Application settings"""
    model_config = SettingsConfigDict(env_prefix="ZCLI_", env_file=".env", case_sensitive=False, extra="ignore")

    # Config file with the wallet registry
    config_path: Optional[Path] = None

    # Local development network
    localhost_api_url: str = "http://localhost:3001"
    localhost_rpc_url: str = "http://localhost:8545"

    # Settlement chain endpoints for public networks
    infura_project_id: str = ""

    # Pause between receipt polls while waiting for confirmation
    receipt_poll_interval_ms: int = 500

    # Logging settings
    log_dir: Path = Path.home() / ".zcli" / "logs"
    log_level: str = "INFO"

    @field_validator('localhost_api_url', 'localhost_rpc_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip('/')

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return v.upper()

    def resolve_config_path(self) -> Path:
        """Config file lookup: explicit path, then the working directory, then home"""
        if self.config_path is not None:
            return self.config_path
        local = Path.cwd() / CONFIG_FILE_NAME
        if local.exists():
            return local
        return Path.home() / CONFIG_FILE_NAME

def get_settings() -> Settings:
    """Get application settings"""
    return Settings()
