from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from relive.database import Base
from relive.models.tag import memory_tags


class Memory(Base):
    __tablename__ = "memories"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)  # rich-text HTML from the editor
    date = Column(Date, nullable=False, index=True)
    location = Column(String(255), nullable=True)
    mood = Column(String(32), nullable=True)  # emoji
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    media = relationship(
        "Media",
        back_populates="memory",
        cascade="all, delete-orphan",
        order_by="Media.id",
    )
    tags = relationship("Tag", secondary=memory_tags, order_by="Tag.name")
