from abc import ABC, abstractmethod
from typing import List, Optional
from vm_inventory.database import models

class IRoleRepository(ABC):
    @abstractmethod
    def find_by_id(self, role_id: int) -> Optional[models.Role]:
        """고유 ID로 특정 역할을 조회합니다."""
        pass

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[models.Role]:
        """이름으로 특정 역할을 조회합니다."""
        pass

    @abstractmethod
    def find_or_create(self, name: str) -> models.Role:
        """
        이름으로 역할을 조회하고, 없으면 새로 생성합니다.
        여러 번 호출해도 같은 이름의 역할이 중복 생성되지 않습니다.
        """
        pass

    @abstractmethod
    def list_all(self) -> List[models.Role]:
        """모든 역할의 목록을 조회합니다."""
        pass
