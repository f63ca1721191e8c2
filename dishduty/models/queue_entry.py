from datetime import date, timedelta

from sqlalchemy import Column, Integer, DateTime, Date, ForeignKey, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from dishduty.database import Base

MIN_DURATION_DAYS = 1
MAX_DURATION_DAYS = 7


class QueueEntry(Base):
    """手動排入的連續值日（依 order 先進先出）"""
    __tablename__ = "assignment_queue"

    id = Column(Integer, primary_key=True, index=True)
    worker_id = Column(Integer, ForeignKey("workers.id"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    duration_days = Column(Integer, nullable=False)
    order = Column(Integer, nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # 關聯
    worker = relationship("Worker", back_populates="queue_entries")

    __table_args__ = (
        CheckConstraint(
            f"duration_days BETWEEN {MIN_DURATION_DAYS} AND {MAX_DURATION_DAYS}",
            name="ck_assignment_queue_duration_days",
        ),
    )

    def __repr__(self):
        return f"<QueueEntry(id={self.id}, order={self.order}, worker_id={self.worker_id}, start_date={self.start_date}, duration_days={self.duration_days})>"

    @property
    def end_date(self) -> date:
        """最後一天值日（含）"""
        return self.start_date + timedelta(days=self.duration_days - 1)
