from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from relive.database import Base

MEDIA_TYPES = ("image", "video", "audio")


class Media(Base):
    __tablename__ = "media"

    id = Column(Integer, primary_key=True, index=True)
    memory_id = Column(Integer, ForeignKey("memories.id", ondelete="CASCADE"), nullable=False, index=True)
    url = Column(Text, nullable=False)
    type = Column(String(10), nullable=False)  # 'image', 'video' or 'audio'
    cloudinary_id = Column(String(255), nullable=True)
    thumbnail_url = Column(Text, nullable=True)
    uploaded_at = Column(DateTime, default=func.now())

    memory = relationship("Memory", back_populates="media")
