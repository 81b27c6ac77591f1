from typing import List, Optional
from sqlalchemy.orm import joinedload
from vm_inventory.database import models
from vm_inventory.repositories.interfaces import IMachineRepository
from vm_inventory.repositories.sqlalchemy.base import SqlalchemyRepository


class SqlalchemyMachineRepository(SqlalchemyRepository, IMachineRepository):
    def create(self, machine_model: models.Machine) -> models.Machine:
        return self._persist(machine_model)

    def find_by_id(self, machine_id: int) -> Optional[models.Machine]:
        return self.db.get(models.Machine, machine_id)

    def list_all(self) -> List[models.Machine]:
        return (
            self.db.query(models.Machine)
            .options(joinedload(models.Machine.company), joinedload(models.Machine.admin))
            .order_by(models.Machine.id.asc())
            .all()
        )

    def save(self, machine: models.Machine) -> models.Machine:
        return self._persist(machine)
