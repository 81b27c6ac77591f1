from sqlalchemy import Column, Integer, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from ..database import Base


class Machine(Base):
    """
    인벤토리에 등록된 가상 머신 자원을 나타냅니다.
    생성 직후에는 회사와 관리자가 없는 '미할당' 상태이며,
    할당(assign) 작업을 통해서만 소유 관계가 설정됩니다.
    """
    __tablename__ = "machines"
    id = Column(Integer, primary_key=True, index=True)
    memory_size = Column(Integer, nullable=False)  # MB
    disk_size = Column(Integer, nullable=False)  # GB
    created_at = Column(DateTime, server_default=func.now())

    company_id = Column(Integer, ForeignKey("companies.id"), nullable=True)
    admin_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    company = relationship("Company", back_populates="machines")
    admin = relationship("User", back_populates="machines")
