from .sqlalchemy_role_repository import SqlalchemyRoleRepository
from .sqlalchemy_company_repository import SqlalchemyCompanyRepository
from .sqlalchemy_user_repository import SqlalchemyUserRepository
from .sqlalchemy_machine_repository import SqlalchemyMachineRepository

__all__ = [
    "SqlalchemyRoleRepository",
    "SqlalchemyCompanyRepository",
    "SqlalchemyUserRepository",
    "SqlalchemyMachineRepository",
]
