import logging

from vm_inventory.config import configure_logging
from vm_inventory.database.database import engine, SessionLocal, Base
from vm_inventory.database import models  # noqa: F401  (모든 모델을 Base.metadata에 등록)
from vm_inventory.repositories.sqlalchemy import (
    SqlalchemyCompanyRepository, SqlalchemyRoleRepository, SqlalchemyUserRepository
)
from vm_inventory.services.identity_service import IdentityService

logger = logging.getLogger(__name__)


def initialize_db(bind=None, session_factory=None):
    """
    테이블을 생성하고, 기본 역할(super_admin, admin, user)을 시드합니다.
    프로세스가 시작될 때마다 호출되며, 여러 번 실행해도 역할이 중복되지 않습니다.

    Args:
        bind: 테이블을 생성할 엔진. 기본값은 설정된 전역 엔진.
        session_factory: 시드에 사용할 세션 팩토리. 기본값은 SessionLocal.
    """
    logger.info("Initializing database...")

    # 모든 테이블을 생성합니다. (이미 존재하면 생성하지 않음)
    Base.metadata.create_all(bind=bind or engine)

    db = (session_factory or SessionLocal)()
    try:
        identity_service = IdentityService(
            SqlalchemyUserRepository(db),
            SqlalchemyCompanyRepository(db),
            SqlalchemyRoleRepository(db),
        )
        return identity_service.seed_roles()
    finally:
        db.close()


def main():
    configure_logging()
    initialize_db()


if __name__ == '__main__':
    main()
