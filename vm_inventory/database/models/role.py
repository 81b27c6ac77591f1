from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from ..database import Base

# 시스템 시작 시 항상 존재해야 하는 역할 이름 목록
DEFAULT_ROLE_NAMES = ("super_admin", "admin", "user")


class Role(Base):
    """
    사용자가 가질 수 있는 권한 등급을 정의합니다.
    (예: 'super_admin', 'admin', 'user').
    시작 시 한 번 시드되며 이후 변경되지 않습니다.
    """
    __tablename__ = "roles"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)

    users = relationship("User", back_populates="role")
