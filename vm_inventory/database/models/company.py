from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from ..database import Base


class Company(Base):
    """
    하나의 테넌트(tenant)를 나타냅니다.
    모든 사용자는 정확히 하나의 회사에 소속되며, 머신은 선택적으로 회사에 할당됩니다.
    """
    __tablename__ = "companies"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)

    users = relationship("User", back_populates="company")
    machines = relationship("Machine", back_populates="company")
