from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from app.core.database import Base
from app.models.category import generate_id


class Service(Base):
    __tablename__ = "services"

    id = Column(String(36), primary_key=True, default=generate_id)
    category_id = Column(
        String(36), ForeignKey("categories.id"), nullable=False, index=True
    )
    title = Column(String(200), nullable=False)
    description = Column(String, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    href = Column(String, nullable=True)
    image = Column(String, nullable=True)
    status = Column(String(20), nullable=False, default="active", index=True)
    featured = Column(Boolean, nullable=False, default=False)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    category = relationship("Category", back_populates="services")

    def __repr__(self):
        return f"<Service(id={self.id}, title='{self.title}')>"
