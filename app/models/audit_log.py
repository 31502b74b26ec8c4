from sqlalchemy import Column, Integer, String, DateTime, JSON

from app.db.base_class import Base


class AuditLog(Base):
    __tablename__ = 'audit_logs'

    id = Column(Integer, primary_key=True, index=True)
    action = Column(String(50), index=True, nullable=False)  # e.g. 'booking.created'
    entity = Column(String(30), index=True, nullable=False)  # 'booking', 'technician', 'bay'
    entity_id = Column(Integer, index=True, nullable=False)
    user_id = Column(Integer, index=True, nullable=True)  # Actor taken from the JWT
    meta = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', entity_id={self.entity_id})>"
