# taskapi/db/engine.py

from typing import Dict

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from taskapi.core.config import get_settings

_engines: Dict[str, Engine] = {}


def get_engine() -> Engine:
    url = get_settings().database_url
    engine = _engines.get(url)
    if engine is None:
        connect_args = {}
        if url.startswith("sqlite"):
            # FastAPI runs sync routes in a threadpool
            connect_args["check_same_thread"] = False
        # echo=True if you want to see SQL printed in the terminal
        engine = create_engine(url, future=True, connect_args=connect_args)
        _engines[url] = engine
    return engine


def dispose_engines() -> None:
    """Close every pooled connection and forget the cached engines."""
    while _engines:
        _, engine = _engines.popitem()
        engine.dispose()
