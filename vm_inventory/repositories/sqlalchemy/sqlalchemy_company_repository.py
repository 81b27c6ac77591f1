from typing import List, Optional
from vm_inventory.database import models
from vm_inventory.repositories.interfaces import ICompanyRepository
from vm_inventory.repositories.sqlalchemy.base import SqlalchemyRepository


class SqlalchemyCompanyRepository(SqlalchemyRepository, ICompanyRepository):
    def create(self, company_model: models.Company) -> models.Company:
        return self._persist(company_model)

    def find_by_id(self, company_id: int) -> Optional[models.Company]:
        return self.db.get(models.Company, company_id)

    def list_all(self) -> List[models.Company]:
        return self.db.query(models.Company).order_by(models.Company.id.asc()).all()
