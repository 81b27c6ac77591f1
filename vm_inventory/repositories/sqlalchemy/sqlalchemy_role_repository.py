from typing import List, Optional
from vm_inventory.database import models
from vm_inventory.repositories.interfaces import IRoleRepository
from vm_inventory.repositories.sqlalchemy.base import SqlalchemyRepository
from vm_inventory.services.exceptions import PersistenceError


class SqlalchemyRoleRepository(SqlalchemyRepository, IRoleRepository):
    def find_by_id(self, role_id: int) -> Optional[models.Role]:
        return self.db.get(models.Role, role_id)

    def find_by_name(self, name: str) -> Optional[models.Role]:
        return self.db.query(models.Role).filter(models.Role.name == name).first()

    def find_or_create(self, name: str) -> models.Role:
        role = self.find_by_name(name)
        if role:
            return role
        try:
            return self._persist(models.Role(name=name))
        except PersistenceError:
            # 다른 프로세스가 먼저 생성한 경우 (unique 제약 위반) 기존 행을 사용합니다.
            role = self.find_by_name(name)
            if role:
                return role
            raise

    def list_all(self) -> List[models.Role]:
        return self.db.query(models.Role).order_by(models.Role.id.asc()).all()
