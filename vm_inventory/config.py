# vm_inventory/config.py
import logging
import os

from dotenv import load_dotenv

# 프로젝트 루트의 .env 파일이 있으면 환경 변수로 읽어옵니다.
load_dotenv()


def _get_bool(value, default=False):
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///vm_inventory.db")

HOST = os.getenv("HOST", "")
PORT = int(os.getenv("PORT", "8000"))

# 클라이언트가 "/api/machines/get" 처럼 프록시 경로로 호출하는 경우 "/api"로 설정합니다.
API_PREFIX = os.getenv("API_PREFIX", "").rstrip("/")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

PASSWORD_HASH_ROUNDS = int(os.getenv("PASSWORD_HASH_ROUNDS", "29000"))
TOKEN_TTL_MINUTES = int(os.getenv("TOKEN_TTL_MINUTES", "60"))

ENFORCE_AUTHORIZATION = _get_bool(os.getenv("ENFORCE_AUTHORIZATION"), default=False)


def configure_logging(level=None):
    """루트 로거의 출력 형식과 레벨을 설정합니다."""
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
