from sqlalchemy import Column, Integer, String, DateTime, Date, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from dishduty.database import Base


class Worker(Base):
    """值日生名單"""
    __tablename__ = "workers"

    id = Column(Integer, primary_key=True, index=True)  # 同時代表建立順序
    name = Column(String(100), nullable=False, unique=True)
    last_assigned_date = Column(Date, nullable=True)  # 最近一次值日日期（從未值日為 NULL）
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # 關聯
    assignments = relationship("Assignment", back_populates="worker")
    queue_entries = relationship("QueueEntry", back_populates="worker")

    # 名稱不分大小寫唯一
    __table_args__ = (
        Index("ix_workers_name_lower", func.lower(name), unique=True),
    )

    def __repr__(self):
        return f"<Worker(id={self.id}, name={self.name}, last_assigned_date={self.last_assigned_date})>"
