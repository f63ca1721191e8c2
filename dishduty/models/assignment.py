from sqlalchemy import Column, Integer, String, DateTime, Date, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from dishduty.database import Base
import enum


class AssignmentStatus(str, enum.Enum):
    """值日狀態"""
    ASSIGNED = "assigned"    # 已指派
    DONE = "done"            # 已完成
    NOT_DONE = "not_done"    # 未完成


class Assignment(Base):
    """值日指派表（每天最多一筆）"""
    __tablename__ = "assignments"

    id = Column(Integer, primary_key=True, index=True)
    worker_id = Column(Integer, ForeignKey("workers.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, unique=True)  # 值日日期，全系統唯一
    status = Column(String(20), nullable=False, default=AssignmentStatus.ASSIGNED.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # 關聯
    worker = relationship("Worker", back_populates="assignments")

    def __repr__(self):
        return f"<Assignment(id={self.id}, date={self.date}, worker_id={self.worker_id}, status={self.status})>"
