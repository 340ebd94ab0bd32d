from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from ..core.config import DEFAULT_CONFIG_DIR, AppConfig, ConfigSet, load_config_set

logger = logging.getLogger(__name__)


class ConfigService:
    def __init__(self, config_dir: Path) -> None:
        self._config_dir = config_dir
        self._config: Optional[ConfigSet] = None

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    def load(self) -> ConfigSet:
        logger.debug("Loading configuration from %s", self._config_dir)
        self._config = load_config_set(self._config_dir)
        return self._config

    def get(self) -> ConfigSet:
        if self._config is None:
            self.load()
        assert self._config is not None
        return self._config

    def get_app_config(self) -> AppConfig:
        return self.get().app_config


def create_config_service() -> ConfigService:
    config_dir = os.getenv("ESTIMATOR_CONFIG_DIR")
    return ConfigService(config_dir=Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR)


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    return create_config_service()
