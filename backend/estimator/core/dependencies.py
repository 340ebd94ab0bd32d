from __future__ import annotations

from ..core.config import AppConfig
from ..services.config_loader import ConfigService
from ..services.config_loader import get_config_service as _get_config_service
from ..services.store import EstimationStore
from .database import get_session_factory


def get_config_service() -> ConfigService:
    return _get_config_service()


async def get_app_config() -> AppConfig:
    service = get_config_service()
    return service.get_app_config()


def get_store() -> EstimationStore:
    return EstimationStore(get_session_factory())
