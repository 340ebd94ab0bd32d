from __future__ import annotations

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from typing import Callable, TypeVar

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from ..models import Base
from ..seed import seed_sample_data
from ..services.config_loader import get_config_service
from ..services.store import EstimationStore

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None
_executor: ThreadPoolExecutor | None = None

T = TypeVar("T")

logger = logging.getLogger(__name__)


def configure_engine(database_url: str, *, echo: bool = False) -> Engine:
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    logger.info("Using database %s", database_url)
    _engine = create_engine(
        database_url,
        echo=echo,
        future=True,
        connect_args={"check_same_thread": False},
    )
    _session_factory = sessionmaker(bind=_engine, expire_on_commit=False)
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        database = get_config_service().get().database
        return configure_engine(database.url, echo=database.echo)
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    if _session_factory is None:
        get_engine()
    assert _session_factory is not None
    return _session_factory


def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    if _executor is None:
        _executor = ThreadPoolExecutor(max_workers=8)
    return _executor


async def run_sync(func: Callable[..., T], /, *args, **kwargs) -> T:
    loop = asyncio.get_running_loop()
    executor = _get_executor()
    partial = functools.partial(func, *args, **kwargs)
    future = executor.submit(partial)
    return await asyncio.wrap_future(future, loop=loop)


def _shutdown_executor() -> None:
    global _executor
    if _executor is not None:
        _executor.shutdown(wait=False)
        _executor = None


def init_db(drop_existing: bool = False) -> None:
    engine = get_engine()
    if drop_existing:
        Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)


@asynccontextmanager
async def lifespan_context(app):  # type: ignore[unused-argument]
    config = get_config_service().get()
    await run_sync(init_db)
    if config.database.seed_on_startup:
        await run_sync(seed_sample_data, EstimationStore(get_session_factory()))
    try:
        yield
    finally:
        await run_sync(dispose_engine)
        _shutdown_executor()
