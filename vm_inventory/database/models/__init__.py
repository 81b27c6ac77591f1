from .role import Role, DEFAULT_ROLE_NAMES
from .company import Company
from .user import User
from .machine import Machine

__all__ = ["Role", "DEFAULT_ROLE_NAMES", "Company", "User", "Machine"]
