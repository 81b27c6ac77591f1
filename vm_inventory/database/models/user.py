from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from ..database import Base


class User(Base):
    """
    시스템에 로그인하고 머신을 관리할 수 있는 사용자를 나타냅니다.
    사용자는 반드시 하나의 역할(Role)과 하나의 회사(Company)를 가집니다.
    """
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)

    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)

    role = relationship("Role", back_populates="users")
    company = relationship("Company", back_populates="users")
    machines = relationship("Machine", back_populates="admin")
