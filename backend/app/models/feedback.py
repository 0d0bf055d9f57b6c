from sqlalchemy import Column, String, DateTime, JSON, Text
from datetime import datetime
from app.core.database import Base
from app.models.category import generate_id


class Feedback(Base):
    __tablename__ = "feedback"

    id = Column(String(36), primary_key=True, default=generate_id)
    type = Column(String(20), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    content = Column(Text, nullable=False)
    contact_info = Column(String(200), nullable=True)
    user_agent = Column(String, nullable=True)
    page_url = Column(String, nullable=True)
    browser_info = Column(JSON, nullable=True)
    priority = Column(String(20), nullable=False, default="normal", index=True)
    status = Column(String(20), nullable=False, default="open", index=True)
    admin_reply = Column(Text, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    submitted_ip = Column(String(64), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Feedback(id={self.id}, type='{self.type}', status='{self.status}')>"
