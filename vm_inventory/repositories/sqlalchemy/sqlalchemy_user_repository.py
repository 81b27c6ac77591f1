from typing import List, Optional
from sqlalchemy.orm import joinedload
from vm_inventory.database import models
from vm_inventory.repositories.interfaces import IUserRepository
from vm_inventory.repositories.sqlalchemy.base import SqlalchemyRepository


class SqlalchemyUserRepository(SqlalchemyRepository, IUserRepository):
    def create(self, user_model: models.User) -> models.User:
        return self._persist(user_model)

    def find_by_id(self, user_id: int) -> Optional[models.User]:
        return self.db.get(models.User, user_id)

    def find_by_email(self, email: str) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.email == email).first()

    def list_all(self) -> List[models.User]:
        return (
            self.db.query(models.User)
            .options(joinedload(models.User.role), joinedload(models.User.company))
            .order_by(models.User.id.asc())
            .all()
        )
