from abc import ABC, abstractmethod
from typing import List, Optional
from vm_inventory.database import models

class IMachineRepository(ABC):
    @abstractmethod
    def create(self, machine_model: models.Machine) -> models.Machine:
        """새로운 머신 정보를 데이터베이스에 생성합니다."""
        pass

    @abstractmethod
    def find_by_id(self, machine_id: int) -> Optional[models.Machine]:
        """고유 ID로 특정 머신을 조회합니다."""
        pass

    @abstractmethod
    def list_all(self) -> List[models.Machine]:
        """
        모든 머신의 목록을 소유 회사(Company)와 관리자(User)와 함께 조회합니다.

        Returns:
            저장 순서(id 오름차순)로 정렬된 머신 모델의 리스트.
        """
        pass

    @abstractmethod
    def save(self, machine: models.Machine) -> models.Machine:
        """변경된 머신 정보를 데이터베이스에 반영합니다."""
        pass
