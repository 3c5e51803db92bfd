from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from libroprestamos.db.session import Base
from libroprestamos.db.types import EpochTimestamp
from libroprestamos.core.clock import utcnow

class MemberRecord(Base):
    __tablename__ = "members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(50), nullable=True)
    membership_date = Column(EpochTimestamp, default=utcnow, nullable=False)

    loans = relationship(
        "LoanRecord",
        back_populates="member",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<MemberRecord(id={self.id}, email='{self.email}')>"
