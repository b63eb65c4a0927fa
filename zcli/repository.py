from abc import ABC, abstractmethod
from typing import List, Optional, Union
from pathlib import Path
import json
from pydantic import ValidationError
from .models import Config
from .logging_config import get_logger

logger = get_logger(__name__)

class ConfigRepository(ABC):
    """Loads and saves the wallet registry"""

    @abstractmethod
    def load(self) -> Config:
        pass

    @abstractmethod
    def save(self, config: Config) -> None:
        pass

class JsonConfigRepository(ConfigRepository):
    """Config stored as a JSON file, in the format of .zcli-config.json"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> Config:
        """Load config from file; a missing file yields the default config"""
        if not self.path.exists():
            logger.info(f"No config at {self.path}, using defaults")
            return Config()
        try:
            with self.path.open('r') as f:
                return Config.model_validate(json.load(f))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Error loading config '{self.path}': {str(e)}")
            raise

    def save(self, config: Config) -> None:
        """Save config to file"""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open('w') as f:
                f.write(config.to_json())
                f.write('\n')
        except OSError as e:
            logger.error(f"Error saving config '{self.path}': {str(e)}")
            raise

class InMemoryConfigRepository(ConfigRepository):
    """Keeps saved snapshots in memory"""

    def __init__(self, config: Optional[Config] = None):
        self.saved: List[Config] = []
        self._config = config or Config()

    def load(self) -> Config:
        return self._config.model_copy(deep=True)

    def save(self, config: Config) -> None:
        snapshot = config.model_copy(deep=True)
        self.saved.append(snapshot)
        self._config = snapshot
