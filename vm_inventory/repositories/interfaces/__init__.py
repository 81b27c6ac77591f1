from .role import IRoleRepository
from .company import ICompanyRepository
from .user import IUserRepository
from .machine import IMachineRepository

__all__ = ["IRoleRepository", "ICompanyRepository", "IUserRepository", "IMachineRepository"]
