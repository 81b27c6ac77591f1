# vm_inventory/utils/security.py
from passlib.context import CryptContext

from vm_inventory import config

# 고정된 반복 횟수(work factor)를 사용하는 느린 단방향 해시
pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__rounds=config.PASSWORD_HASH_ROUNDS,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return pwd_context.verify(plain_password, password_hash)
    except ValueError:
        # passlib이 인식하지 못하는 형식의 해시
        return False
