# src/libroprestamos/models/loan.py
from sqlalchemy import Column, ForeignKey, Integer
from sqlalchemy.orm import relationship
from libroprestamos.db.session import Base
from libroprestamos.db.types import EpochTimestamp
from libroprestamos.core.clock import utcnow

class LoanRecord(Base):
    __tablename__ = "loans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)
    member_id = Column(Integer, ForeignKey("members.id", ondelete="CASCADE"), nullable=False, index=True)
    loan_date = Column(EpochTimestamp, default=utcnow, nullable=False)
    due_date = Column(EpochTimestamp, nullable=False)
    # NULL mientras el préstamo está activo
    return_date = Column(EpochTimestamp, nullable=True, index=True)

    book = relationship("BookRecord", back_populates="loans")
    member = relationship("MemberRecord", back_populates="loans")

    def __repr__(self):
        status = " [RETURNED]" if self.return_date is not None else ""
        return f"<LoanRecord(id={self.id}, book_id={self.book_id}, member_id={self.member_id}){status}>"
