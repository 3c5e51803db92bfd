"""
Repositorio de socios.
Traduce entre filas ``MemberRecord`` y entidades ``Member``.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundError
from ..domain.member import Member
from ..models.member import MemberRecord
from .base import require_id

logger = logging.getLogger(__name__)


class MemberRepository:
    def __init__(self, db: Session):
        self.db = db

    def _to_entity(self, record: MemberRecord) -> Member:
        return Member(
            id=record.id,
            first_name=record.first_name,
            last_name=record.last_name,
            email=record.email,
            phone=record.phone,
            membership_date=record.membership_date,
        )

    def _fetch(self, stmt) -> List[MemberRecord]:
        return list(self.db.execute(stmt.execution_options(populate_existing=True)).scalars().all())

    def find_by_id(self, member_id: int) -> Optional[Member]:
        rows = self._fetch(select(MemberRecord).where(MemberRecord.id == member_id).limit(1))
        return self._to_entity(rows[0]) if rows else None

    def find_all(self) -> List[Member]:
        rows = self._fetch(select(MemberRecord).order_by(MemberRecord.id))
        return [self._to_entity(row) for row in rows]

    def find_by_email(self, email: str) -> Optional[Member]:
        rows = self._fetch(select(MemberRecord).where(MemberRecord.email == email).limit(1))
        return self._to_entity(rows[0]) if rows else None

    def create(self, member: Member) -> Member:
        record = MemberRecord(
            first_name=member.first_name,
            last_name=member.last_name,
            email=member.email,
            phone=member.phone,
            membership_date=member.membership_date,
        )
        self.db.add(record)
        self.db.flush()
        self.db.refresh(record)
        logger.debug(f"Member {record.id} inserted ({record.email}).")
        return self._to_entity(record)

    def update(self, member: Member) -> Member:
        member_id = require_id(member, "Cannot update member without ID")
        record = self.db.get(MemberRecord, member_id, populate_existing=True)
        if record is None:
            raise NotFoundError("Member", member_id)
        record.first_name = member.first_name
        record.last_name = member.last_name
        record.email = member.email
        record.phone = member.phone
        self.db.flush()
        self.db.refresh(record)
        return self._to_entity(record)

    def delete(self, member_id: int) -> bool:
        result = self.db.execute(
            delete(MemberRecord).where(MemberRecord.id == member_id),
            execution_options={"synchronize_session": False},
        )
        return result.rowcount > 0
