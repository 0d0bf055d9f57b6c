from sqlalchemy import Column, String, DateTime
from datetime import datetime
from app.core.database import Base
from app.models.category import generate_id


class Submission(Base):
    """A resource suggested by a visitor, held for admin review."""

    __tablename__ = "submissions"

    id = Column(String(36), primary_key=True, default=generate_id)
    category = Column(String(100), nullable=False)
    title = Column(String(100), nullable=False, index=True)
    description = Column(String(500), nullable=False)
    url = Column(String, nullable=False, index=True)
    submitted_by = Column(String(100), nullable=True)
    submitted_ip = Column(String(64), nullable=True)
    status = Column(String(20), nullable=False, default="pending", index=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Submission(id={self.id}, title='{self.title}', status='{self.status}')>"
