import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from vm_inventory.database import models
from vm_inventory.repositories.interfaces import (
    IMachineRepository, ICompanyRepository, IUserRepository
)
from vm_inventory.services.exceptions import NotFoundError, ValidationError
from vm_inventory.services.identity_service import company_to_dict
from vm_inventory.services.policy import RequestSession, require_machine_manager
from vm_inventory.services.validators import coerce_int

logger = logging.getLogger(__name__)


class _Unset:
    """요청 본문에 필드 자체가 없었음을 나타내는 표식. (None 과 구분됩니다)"""

    def __repr__(self):
        return "UNSET"

    def __bool__(self):
        return False


UNSET = _Unset()


@dataclass(frozen=True)
class MachineAssignment:
    """
    머신 할당 요청의 부분 업데이트 입력.

    각 필드는 UNSET(변경하지 않음), None(할당 해제), 정수 ID(할당) 중 하나입니다.
    """
    company_id: Any = UNSET
    admin_id: Any = UNSET

    @classmethod
    def from_request(cls, data: Dict[str, Any]) -> "MachineAssignment":
        """JSON 본문에서 companyId, adminId 키의 '존재 여부'로 입력을 만듭니다."""
        return cls(
            company_id=data["companyId"] if "companyId" in data else UNSET,
            admin_id=data["adminId"] if "adminId" in data else UNSET,
        )

    def is_empty(self) -> bool:
        return self.company_id is UNSET and self.admin_id is UNSET


def machine_to_dict(machine: models.Machine) -> Dict[str, Any]:
    return {
        "id": machine.id,
        "memorySize": machine.memory_size,
        "diskSize": machine.disk_size,
        "companyId": machine.company_id,
        "adminId": machine.admin_id,
    }


def admin_to_dict(user: Optional[models.User]) -> Optional[Dict[str, Any]]:
    # 관리자 정보는 id, name, email 만 노출합니다.
    if user is None:
        return None
    return {"id": user.id, "name": user.name, "email": user.email}


class MachineService:
    """머신 생성, 할당, 조회 서비스를 제공합니다."""

    def __init__(self, machine_repo: IMachineRepository, company_repo: ICompanyRepository,
                 user_repo: IUserRepository, enforce_authorization: bool = False):
        self.machine_repo = machine_repo
        self.company_repo = company_repo
        self.user_repo = user_repo
        self.enforce_authorization = enforce_authorization

    def create_machine(self, memory_size, disk_size, session: Optional[RequestSession] = None) -> Dict[str, Any]:
        """
        회사와 관리자가 없는 미할당 상태의 머신을 생성합니다.

        Args:
            memory_size: 메모리 크기 (MB).
            disk_size: 디스크 크기 (GB).
            session: 요청의 인증 컨텍스트.

        Returns:
            생성된 머신의 정보를 담은 딕셔너리. companyId, adminId는 항상 None 입니다.

        Raises:
            ValidationError: memorySize 또는 diskSize가 없거나(0 포함) 정수가 아닐 때.
            PermissionDeniedError: 머신을 관리할 수 없는 역할일 때.
            PersistenceError: 저장에 실패했을 때.
        """
        require_machine_manager(session, self.enforce_authorization)

        if not memory_size or not disk_size:
            raise ValidationError("memorySize and diskSize are required")

        memory_size = coerce_int(memory_size, "memorySize")
        disk_size = coerce_int(disk_size, "diskSize")
        # "0" 같은 문자열은 변환 후에야 0으로 드러납니다.
        if not memory_size or not disk_size:
            raise ValidationError("memorySize and diskSize are required")

        new_machine = models.Machine(memory_size=memory_size, disk_size=disk_size)
        created_machine = self.machine_repo.create(new_machine)
        logger.info(
            "Machine %s created (memory=%sMB, disk=%sGB)",
            created_machine.id, created_machine.memory_size, created_machine.disk_size,
        )
        return machine_to_dict(created_machine)

    def assign_machine(self, machine_id: int, assignment: MachineAssignment,
                       session: Optional[RequestSession] = None) -> Dict[str, Any]:
        """
        머신의 소유 회사 및/또는 관리자를 설정합니다.

        assignment에서 UNSET이 아닌 필드만 변경하므로, adminId만 보내면 companyId는
        그대로 유지됩니다. None을 보내면 해당 연결을 해제합니다.
        참조하는 회사와 사용자가 실제로 존재하는지 저장 전에 확인합니다.

        Raises:
            NotFoundError: 머신, 회사, 관리자 중 하나를 찾을 수 없을 때.
            ValidationError: ID가 정수가 아닐 때.
            PermissionDeniedError: 머신을 관리할 수 없는 역할일 때.
            PersistenceError: 저장에 실패했을 때.
        """
        require_machine_manager(session, self.enforce_authorization)

        machine = self.machine_repo.find_by_id(machine_id)
        if not machine:
            raise NotFoundError("Machine not found")

        if assignment.is_empty():
            # 변경할 필드가 없으면 저장하지 않고 현재 상태를 반환합니다.
            return machine_to_dict(machine)

        company_id = assignment.company_id
        if company_id is not UNSET and company_id is not None:
            company_id = coerce_int(company_id, "companyId")
            if not self.company_repo.find_by_id(company_id):
                raise NotFoundError(f"Company with id '{company_id}' not found.")

        admin_id = assignment.admin_id
        if admin_id is not UNSET and admin_id is not None:
            admin_id = coerce_int(admin_id, "adminId")
            if not self.user_repo.find_by_id(admin_id):
                raise NotFoundError(f"User with id '{admin_id}' not found.")

        if company_id is not UNSET:
            machine.company_id = company_id
        if admin_id is not UNSET:
            machine.admin_id = admin_id

        saved_machine = self.machine_repo.save(machine)
        logger.info(
            "Machine %s assigned (company_id=%s, admin_id=%s)",
            saved_machine.id, saved_machine.company_id, saved_machine.admin_id,
        )
        return machine_to_dict(saved_machine)

    def list_machines(self) -> List[Dict[str, Any]]:
        """모든 머신을 소유 회사, 관리자 정보와 함께 조회합니다."""
        machines = []
        for m in self.machine_repo.list_all():
            machine_data = machine_to_dict(m)
            machine_data["company"] = company_to_dict(m.company)
            machine_data["admin"] = admin_to_dict(m.admin)
            machines.append(machine_data)
        return machines
