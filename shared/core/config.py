import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Always load .env from root
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
load_dotenv(os.path.join(BASE_DIR, ".env"))


class Settings(BaseSettings):
    JWT_SECRET: str = os.getenv("JWT_SECRET", "change-me")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_MINUTES: int = int(
        os.getenv("JWT_EXPIRE_MINUTES", 1440))  # 24 hours default

    DB_USER: str | None = os.getenv("DB_USER")
    DB_PASS: str | None = os.getenv("DB_PASS")
    DB_HOST: str | None = os.getenv("DB_HOST", "localhost")
    DB_PORT: str | None = os.getenv("DB_PORT", "5432")
    DB_NAME: str | None = os.getenv("DB_NAME", "warehouse")
    # Full URL override, e.g. sqlite:///./warehouse.db for local runs
    DATABASE_URL: str | None = os.getenv("DATABASE_URL")

    CORS_ORIGINS: str = os.getenv(
        "CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", 8002))
    RELOAD: bool = os.getenv("RELOAD", "False").lower() == "true"

    # Decimal places kept on reject log base quantities; -1 keeps the full
    # column precision (6 places)
    REJECT_QTY_DECIMALS: int = int(os.getenv("REJECT_QTY_DECIMALS", 3))
    ENFORCE_STOCK_FLOOR: bool = os.getenv(
        "ENFORCE_STOCK_FLOOR", "True").lower() == "true"

    # Seeded on first start when the users table is empty
    ADMIN_USERNAME: str = os.getenv("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "12345")
    ADMIN_NAME: str = os.getenv("ADMIN_NAME", "Super Admin")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def reject_qty_decimals(self) -> int | None:
        return None if self.REJECT_QTY_DECIMALS < 0 else self.REJECT_QTY_DECIMALS


settings = Settings()

WAREHOUSE_DATABASE_URL = settings.DATABASE_URL or (
    f"postgresql+psycopg2://{settings.DB_USER}:{settings.DB_PASS}@{settings.DB_HOST}:{settings.DB_PORT}/{settings.DB_NAME}"
)
