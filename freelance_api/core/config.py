# freelance_api/core/config.py
# 應用程式設定 (資料庫連線字串、JWT 秘鑰、排程與上傳設定等)
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # 資料庫設定
    DATABASE_URL: str
    DATABASE_ECHO: bool = False # 設為 True 會在 console 印出 SQL 語句
    DATABASE_POOL_SIZE: int = 5
    DATABASE_POOL_RECYCLE_SECONDS: int = 1800
    # 啟動時自動建立資料表 (開發環境用)
    DATABASE_CREATE_TABLES: bool = False

    # JWT 設定
    JWT_SECRET_KEY: str
    # JWT 演算法
    JWT_ALGORITHM: str = "HS256"
    # 存取令牌過期時間（分鐘），預設 30 天
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 30
    # 存放 JWT 的 Cookie 名稱
    JWT_COOKIE_NAME: str = "token"

    # 前端網址 (用於組出確認信、重設密碼信中的連結)
    APP_URL: str = "http://localhost:4200"

    # 一次性權杖 (註冊確認 / 重設密碼) 的有效時間（分鐘）
    REGISTER_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    PASSWORD_RESET_TOKEN_EXPIRE_MINUTES: int = 60

    PASSWORD_MIN_LENGTH: int = 8

    # 過期權杖清理排程
    CLEAR_TOKENS_ENABLED: bool = True
    CLEAR_TOKENS_INTERVAL_SECONDS: int = 3600

    # 檔案上傳
    UPLOAD_DIR: str = "static/uploads"
    UPLOAD_URL_PREFIX: str = "/static/uploads"
    UPLOAD_MAX_SIZE: int = 5 * 1024 * 1024 # 5 MB

    # CORS 允許的來源 (以逗號分隔)
    CORS_ORIGINS: str = "*"

    # 環境變數檔案
    class Config:
        env_file = ".env"

# 建立設定實例
settings = Settings()
