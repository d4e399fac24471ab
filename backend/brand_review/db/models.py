from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class ReviewLog(Base):
    __tablename__ = "review_logs"

    id = Column(Integer, primary_key=True)
    agent_id = Column(String(128))
    brand_id = Column(String(64))
    mode = Column(String(16), nullable=False)  # vision | chat | mock
    query_chars = Column(Integer, default=0)
    response = Column(Text)
    compliance_score = Column(Integer)
    status = Column(String(32))
    parse_mode = Column(String(16))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "agentId": self.agent_id,
            "brandId": self.brand_id,
            "mode": self.mode,
            "queryChars": self.query_chars,
            "complianceScore": self.compliance_score,
            "status": self.status,
            "parseMode": self.parse_mode,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
