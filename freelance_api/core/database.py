# freelance_api/core/database.py
# MySQL (aiomysql) 非同步連線、Session 與 ORM 基底類別
import logging
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from freelance_api.core.config import settings

logger = logging.getLogger(__name__)

engine = create_async_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True, # 取出連線前先 PING，避開已被 MySQL 關閉的連線
    pool_size=settings.DATABASE_POOL_SIZE,
    pool_recycle=settings.DATABASE_POOL_RECYCLE_SECONDS, # 需小於 MySQL 的 wait_timeout
    echo=settings.DATABASE_ECHO,
)

# commit 後仍可讀取物件屬性 (回應序列化時不會再觸發查詢)
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()


async def create_tables() -> None:
    """
    依 Model 建立尚未存在的資料表 (開發環境用，正式環境請用 migration)
    呼叫前所有 Model 模組必須已經被匯入
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")


async def get_db() -> AsyncSession:
    """
    FastAPI Dependency: 每個 request 一個 session
    request 中途出錯時先 rollback，避免未完成的交易留在連線上
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
