import asyncio
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from freelance_api.core.config import settings
from freelance_api.core.database import create_tables
from freelance_api.routers import auth_router, freelancer_router, search_router, file_router
from freelance_api.services.file_service import UPLOAD_DIR
from freelance_api.services.token_sweeper import run_token_sweeper

# --- 匯入所有 Model 檔案 ---
# 確保在應用程式啟動時被 SQLAlchemy 註冊 (relationship 以字串互相參照)
from freelance_api.models import freelancer
from freelance_api.models import experience
from freelance_api.models import education
from freelance_api.models import language
from freelance_api.models import token


# 設定基礎日誌
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__) # 建立一個 logger 實例


@asynccontextmanager
async def lifespan(_app: FastAPI):
    if settings.DATABASE_CREATE_TABLES:
        await create_tables()

    # 啟動過期權杖清理排程
    sweeper_task = None
    if settings.CLEAR_TOKENS_ENABLED:
        sweeper_task = asyncio.create_task(run_token_sweeper(settings.CLEAR_TOKENS_INTERVAL_SECONDS))
    yield
    if sweeper_task is not None:
        sweeper_task.cancel()
        try:
            await sweeper_task
        except asyncio.CancelledError:
            logger.info("Token sweeper stopped")


app = FastAPI(title="Freelance API", lifespan=lifespan)

# --- 設定 CORS (跨來源資源共用) ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.CORS_ORIGINS.split(",")],
    allow_credentials=True,
    allow_methods=["*"], # 允許所有 HTTP 方法
    allow_headers=["*"], # 允許所有 HTTP 標頭
)

# --- 上傳檔案 ---
app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=str(UPLOAD_DIR)), name="uploads")

# --- 根路徑 ---
@app.get("/")
def read_root():
    return {"status": "success", "message": "Backend is running!"}

# --- 載入 API 路由 ---
app.include_router(auth_router.router)
app.include_router(freelancer_router.router)
app.include_router(search_router.router)
app.include_router(file_router.router)
