import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vm_inventory.services.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class SqlalchemyRepository:
    """세션을 보관하고, 쓰기 작업의 commit/rollback을 공통으로 처리합니다."""

    def __init__(self, db_session: Session):
        self.db = db_session

    def _persist(self, model):
        """
        모델을 세션에 추가하고 커밋한 뒤, DB가 채운 값(id 등)을 다시 읽어옵니다.

        Raises:
            PersistenceError: 제약 조건 위반, 연결 실패, 컬럼 범위를 넘는 정수 등 저장소 오류가 발생했을 때.
        """
        try:
            self.db.add(model)
            self.db.commit()
            self.db.refresh(model)
        except (SQLAlchemyError, OverflowError) as e:
            self.db.rollback()
            logger.warning("Failed to persist %s: %s", type(model).__name__, e)
            raise PersistenceError(str(e.orig) if getattr(e, "orig", None) else str(e)) from e
        return model
