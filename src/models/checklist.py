from sqlalchemy import Boolean, Column, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from config import DISASTER_TYPES
from .base import Base, new_id, utc_now_iso


class ChecklistModel(Base):
    __tablename__ = "checklists"

    id = Column(String, primary_key=True, index=True, default=new_id)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    disaster_type = Column(
        Enum(*DISASTER_TYPES, name="disaster_type", create_constraint=True),
        index=True,
        nullable=False,
    )
    is_published = Column(Boolean, default=True, index=True)
    created_by = Column(String, nullable=True)
    created_at = Column(String, nullable=False, default=utc_now_iso)
    updated_at = Column(String, nullable=False, default=utc_now_iso, onupdate=utc_now_iso)

    items = relationship(
        "ChecklistItemModel",
        back_populates="checklist",
        cascade="all, delete-orphan",
        order_by="ChecklistItemModel.order_index",
    )


class ChecklistItemModel(Base):
    __tablename__ = "checklist_items"

    id = Column(String, primary_key=True, index=True, default=new_id)
    checklist_id = Column(
        String, ForeignKey("checklists.id", ondelete="CASCADE"), index=True, nullable=False
    )
    item_text = Column(String, nullable=False)
    category = Column(String, nullable=True)
    is_essential = Column(Boolean, default=False)
    order_index = Column(Integer, nullable=False)
    created_at = Column(String, nullable=False, default=utc_now_iso)

    checklist = relationship("ChecklistModel", back_populates="items")
