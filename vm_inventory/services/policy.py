# vm_inventory/services/policy.py
from dataclasses import dataclass
from typing import Optional

from vm_inventory.services.exceptions import PermissionDeniedError, TokenInvalidError

# 머신을 생성하거나 할당할 수 있는 역할
MACHINE_MANAGER_ROLES = frozenset({"super_admin", "admin"})


@dataclass(frozen=True)
class RequestSession:
    """
    요청마다 WSGI 계층에서 만들어 핸들러와 서비스에 명시적으로 전달되는 인증 컨텍스트.
    토큰이 없으면 익명(anonymous) 세션입니다.
    """
    user_id: Optional[int] = None
    role: Optional[str] = None
    company_id: Optional[int] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @classmethod
    def anonymous(cls) -> "RequestSession":
        return cls()


def require_machine_manager(session: Optional[RequestSession], enforce: bool = False) -> None:
    """
    머신 생성/할당 권한을 검사합니다.

    인증된 세션은 항상 역할을 검사하고, 익명 세션은 enforce가 켜져 있을 때만 거부합니다.

    Raises:
        TokenInvalidError: enforce=True 인데 인증되지 않은 요청일 때.
        PermissionDeniedError: 인증된 사용자의 역할이 super_admin, admin 이 아닐 때.
    """
    if session is None or not session.is_authenticated:
        if enforce:
            raise TokenInvalidError("Authentication required.")
        return

    if session.role not in MACHINE_MANAGER_ROLES:
        raise PermissionDeniedError(f"Role '{session.role}' is not allowed to manage machines.")
