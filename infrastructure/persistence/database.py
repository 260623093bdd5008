from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from infrastructure.persistence.models.rates import Base


def ensure_sqlite_directory(db_url: str) -> None:
	url = make_url(db_url)
	if url.get_backend_name() != 'sqlite' or not url.database or url.database == ':memory:':
		return
	Path(url.database).parent.mkdir(parents=True, exist_ok=True)


class Database:
	def __init__(self, db_url: str):
		ensure_sqlite_directory(db_url)
		self.engine = create_async_engine(db_url)
		self.session_factory = async_sessionmaker(
			self.engine,
			class_=AsyncSession,
			autoflush=True,
			expire_on_commit=False,
		)

	@property
	def dialect_name(self) -> str:
		return self.engine.dialect.name

	async def create_tables(self) -> None:
		async with self.engine.begin() as conn:
			await conn.run_sync(Base.metadata.create_all)

	async def drop_tables(self) -> None:
		async with self.engine.begin() as conn:
			await conn.run_sync(Base.metadata.drop_all)

	async def close(self) -> None:
		await self.engine.dispose()

	@asynccontextmanager
	async def session(self):
		async with self.session_factory() as session:
			try:
				yield session
				await session.commit()
			except Exception:
				await session.rollback()
				raise
			finally:
				await session.close()
