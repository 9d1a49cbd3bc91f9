from sqlalchemy import Boolean, Column, DateTime, ForeignKey, JSON, String
import uuid

from personalab.database import Base
from personalab.utils.timezone_utils import utc_now


def _new_id() -> str:
    return str(uuid.uuid4())


class PersonaRow(Base):
    """Record Store row for one persona (data holds the validated document)."""

    __tablename__ = "personas"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    author_name = Column(String, nullable=True)
    title = Column(String, nullable=False)
    locale = Column(String, nullable=False)
    is_public = Column(Boolean, nullable=False, default=True, index=True)
    source_persona_id = Column(
        String(36), ForeignKey("personas.id", ondelete="SET NULL"), nullable=True
    )
    data = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False, index=True
    )

    def __repr__(self):
        return f"<PersonaRow id={self.id} user_id={self.user_id} title={self.title!r}>"
