from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from trustscore.config import logger, settings

Row = Dict[str, Any]


class Database:
    """Thin async wrapper that runs parameterized SQL and returns rows as dicts."""

    def __init__(self, engine: Optional[AsyncEngine] = None, url: Optional[str] = None):
        self.engine = engine or create_async_engine(
            url or settings.DATABASE_URL,
            pool_size=settings.DATABASE_POOL_SIZE,
            pool_pre_ping=True,
        )

    async def fetch_all(self, query: str, params: Optional[Mapping[str, Any]] = None) -> List[Row]:
        async with self.engine.connect() as conn:
            result = await conn.execute(text(query), dict(params or {}))
            return [dict(row) for row in result.mappings().all()]

    async def fetch_one(self, query: str, params: Optional[Mapping[str, Any]] = None) -> Optional[Row]:
        rows = await self.fetch_all(query, params)
        return rows[0] if rows else None

    async def execute(self, query: str, params: Optional[Mapping[str, Any]] = None) -> None:
        async with self.engine.begin() as conn:
            await conn.execute(text(query), dict(params or {}))

    async def close(self) -> None:
        logger.info("Disposing database engine")
        await self.engine.dispose()
