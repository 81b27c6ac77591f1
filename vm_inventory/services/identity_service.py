import logging
import uuid
from datetime import datetime, timedelta
from typing import Dict, Any, List, Optional

from vm_inventory import config
from vm_inventory.database import models
from vm_inventory.repositories.interfaces import (
    ICompanyRepository, IUserRepository, IRoleRepository
)
from vm_inventory.services.exceptions import (
    ValidationError, NotFoundError, AuthenticationError, TokenInvalidError
)
from vm_inventory.services.validators import coerce_int
from vm_inventory.utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)


def company_to_dict(company: Optional[models.Company]) -> Optional[Dict[str, Any]]:
    if company is None:
        return None
    return {"id": company.id, "name": company.name}


def role_to_dict(role: Optional[models.Role]) -> Optional[Dict[str, Any]]:
    if role is None:
        return None
    return {"id": role.id, "name": role.name}


def user_to_dict(user: models.User) -> Dict[str, Any]:
    # password_hash는 어떤 응답에도 포함하지 않습니다.
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "roleId": user.role_id,
        "companyId": user.company_id,
    }


class IdentityService:
    """회사, 사용자, 역할, 인증 등 신원 관리 서비스를 제공합니다."""
    _token_cache = {}

    def __init__(self, user_repo: IUserRepository, company_repo: ICompanyRepository, role_repo: IRoleRepository):
        """
        IdentityService를 초기화합니다.

        Args:
            user_repo: 사용자 데이터에 접근하기 위한 리포지토리.
            company_repo: 회사 데이터에 접근하기 위한 리포지토리.
            role_repo: 역할 데이터에 접근하기 위한 리포지토리.
        """
        self.user_repo = user_repo
        self.company_repo = company_repo
        self.role_repo = role_repo

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    def seed_roles(self) -> List[Dict[str, Any]]:
        """
        기본 역할(super_admin, admin, user)을 find-or-create 방식으로 생성합니다.
        프로세스가 시작될 때마다 호출되어도 역할 행이 중복되지 않습니다.
        """
        roles = [self.role_repo.find_or_create(name) for name in models.DEFAULT_ROLE_NAMES]
        logger.info("Roles seeded: %s", ", ".join(r.name for r in roles))
        return [role_to_dict(r) for r in roles]

    def list_roles(self) -> List[Dict[str, Any]]:
        """모든 역할의 목록을 조회합니다."""
        return [role_to_dict(r) for r in self.role_repo.list_all()]

    # ------------------------------------------------------------------
    # Companies
    # ------------------------------------------------------------------

    def create_company(self, name: Optional[str]) -> Dict[str, Any]:
        """
        새로운 회사를 생성합니다. 회사는 이름만 저장합니다.

        Raises:
            ValidationError: 이름이 없을 때.
            PersistenceError: 저장에 실패했을 때.
        """
        if not name:
            raise ValidationError("Company name is required")
        created_company = self.company_repo.create(models.Company(name=name))
        logger.info("Company %s created (id=%s)", created_company.name, created_company.id)
        return company_to_dict(created_company)

    def list_companies(self) -> List[Dict[str, Any]]:
        """모든 회사의 목록을 조회합니다."""
        return [company_to_dict(c) for c in self.company_repo.list_all()]

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def create_user(self, email: Optional[str] = None, password: Optional[str] = None,
                    role_id: Optional[int] = None, name: Optional[str] = None,
                    company_id: Optional[int] = None) -> Dict[str, Any]:
        """
        새로운 사용자를 생성합니다. 비밀번호는 해시하여 저장합니다.

        email, password, roleId만 필수 값으로 검사합니다. name과 companyId가 없으면
        DB의 NOT NULL 제약에 의해 PersistenceError가 발생합니다.

        Raises:
            ValidationError: email, password, roleId 중 하나라도 없을 때.
            NotFoundError: roleId 또는 companyId에 해당하는 역할, 회사가 없을 때.
            PersistenceError: 제약 조건 위반(중복 이메일, 회사 누락 등) 시.
        """
        if not email or not password or not role_id:
            raise ValidationError("Missing required fields")

        role_id = coerce_int(role_id, "roleId")
        if company_id is not None:
            company_id = coerce_int(company_id, "companyId")

        if not self.role_repo.find_by_id(role_id):
            raise NotFoundError(f"Role with id '{role_id}' not found.")
        if company_id is not None and not self.company_repo.find_by_id(company_id):
            raise NotFoundError(f"Company with id '{company_id}' not found.")

        new_user = models.User(
            name=name,
            email=email,
            password_hash=hash_password(password),
            role_id=role_id,
            company_id=company_id,
        )
        created_user = self.user_repo.create(new_user)
        logger.info("User %s created (id=%s, role_id=%s)", created_user.email, created_user.id, created_user.role_id)
        return user_to_dict(created_user)

    def list_users(self) -> List[Dict[str, Any]]:
        """모든 사용자의 목록을 역할, 회사 정보와 함께 조회합니다. (비밀번호 제외)"""
        users = []
        for u in self.user_repo.list_all():
            user_data = user_to_dict(u)
            user_data["role"] = role_to_dict(u.role)
            user_data["company"] = company_to_dict(u.company)
            users.append(user_data)
        return users

    def get_user(self, user_id: int) -> Dict[str, Any]:
        """
        ID로 특정 사용자를 조회합니다. (비밀번호 제외)

        Raises:
            NotFoundError: 해당 ID의 사용자를 찾을 수 없을 때.
        """
        user = self.user_repo.find_by_id(user_id)
        if not user:
            raise NotFoundError(f"User with id '{user_id}' not found.")
        return user_to_dict(user)

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def authenticate(self, email: Optional[str] = None, password: Optional[str] = None) -> Dict[str, Any]:
        """
        자격증명을 검증하고, 성공 시 인증 토큰을 발급합니다.

        Raises:
            ValidationError: email 또는 password가 없을 때.
            AuthenticationError: 사용자가 없거나 비밀번호가 일치하지 않을 때.
        """
        if not email or not password:
            raise ValidationError("email and password are required")

        user = self.user_repo.find_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt for %s", email)
            raise AuthenticationError("Invalid email or password.")

        self._prune_expired_tokens()
        token = str(uuid.uuid4())
        expires_at = datetime.now() + timedelta(minutes=config.TOKEN_TTL_MINUTES)
        self._token_cache[token] = {
            'user_id': user.id,
            'role': user.role.name if user.role else None,
            'company_id': user.company_id,
            'expires_at': expires_at
        }
        return {"token": token, "expires_at": expires_at.isoformat(), "user": user_to_dict(user)}

    @classmethod
    def _prune_expired_tokens(cls) -> None:
        # 발급 시점에 만료된 토큰을 캐시에서 제거합니다.
        now = datetime.now()
        expired = [t for t, data in cls._token_cache.items() if now > data['expires_at']]
        for t in expired:
            del cls._token_cache[t]

    def validate_token(self, token: str) -> Dict[str, Any]:
        """
        인증 토큰의 유효성을 검증하고, 유효하면 토큰 데이터를 반환합니다.

        Raises:
            TokenInvalidError: 토큰을 찾을 수 없거나 만료되었을 때.
        """
        token_data = self._token_cache.get(token)
        if not token_data:
            raise TokenInvalidError("Token not found or invalid.")

        if datetime.now() > token_data['expires_at']:
            del self._token_cache[token]
            raise TokenInvalidError("Token has expired.")

        return token_data
