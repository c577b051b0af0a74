# cloudops/config.py
import logging
import os
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# 프로젝트 루트 디렉토리 (.env 파일 위치)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


class Settings(BaseSettings):
    """
    애플리케이션 설정을 정의하는 Pydantic BaseSettings 모델입니다.
    환경 변수 및 프로젝트 루트의 .env 파일에서 값을 자동으로 로드합니다.
    """

    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=True
    )

    # --- 애플리케이션 기본 설정 ---
    APP_NAME: str = "CloudOps Resource Tree"
    APP_ENV: str = Field("development", description="Application environment (development, production, testing)")
    DEBUG_MODE: bool = Field(False, description="Echo SQL statements issued by SQLAlchemy")

    # --- 데이터베이스 설정 ---
    DATABASE_URL: str = Field("sqlite:///cloudops_tree.db", description="SQLAlchemy database URL")

    # --- 로깅 / 서버 설정 ---
    LOG_LEVEL: str = Field("INFO", description="Root log level")
    SERVER_HOST: str = ""
    SERVER_PORT: int = 8000

    # 리소스 조회 시 기본 페이지 크기
    DEFAULT_PAGE_SIZE: int = Field(10, gt=0)


settings = Settings()


def setup_logging(level: Optional[str] = None):
    """루트 로거를 설정합니다. level이 없으면 settings.LOG_LEVEL을 사용합니다."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
