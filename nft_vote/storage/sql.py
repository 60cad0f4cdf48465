"""
Flask-SQLAlchemy repositories.

Uniqueness (one vote per user, one user per email/wallet) is enforced by
table constraints, so the guarantees hold across processes sharing a database.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..extensions import db
from ..models import User, Vote, VerificationCode
from .base import DuplicateKeyError
from .tables import UserRow, VoteRow, VerificationCodeRow


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise


class SQLCodeRepository:
    def save(self, record: VerificationCode) -> None:
        db.session.merge(VerificationCodeRow(
            email=record.email,
            code_hash=record.code_hash,
            expires_at=record.expires_at,
            attempts=record.attempts,
        ))
        _commit()

    def get(self, email: str) -> Optional[VerificationCode]:
        row = db.session.get(VerificationCodeRow, email)
        return row.to_domain() if row else None

    def take(self, email: str, code_hash: str) -> bool:
        result = db.session.execute(
            delete(VerificationCodeRow).where(
                VerificationCodeRow.email == email,
                VerificationCodeRow.code_hash == code_hash,
            )
        )
        _commit()
        return result.rowcount == 1

    def record_failure(self, email: str) -> int:
        db.session.execute(
            update(VerificationCodeRow)
            .where(VerificationCodeRow.email == email)
            .values(attempts=VerificationCodeRow.attempts + 1)
        )
        _commit()
        attempts = db.session.execute(
            select(VerificationCodeRow.attempts).where(VerificationCodeRow.email == email)
        ).scalar_one_or_none()
        return attempts or 0

    def delete_expired(self, now: datetime) -> int:
        result = db.session.execute(delete(VerificationCodeRow).where(VerificationCodeRow.expires_at <= now))
        _commit()
        return result.rowcount


class SQLUserRepository:
    def add(self, user: User) -> User:
        db.session.add(UserRow.from_domain(user))
        try:
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            raise DuplicateKeyError(str(e.orig)) from e
        return user

    def get(self, user_id: str) -> Optional[User]:
        row = db.session.get(UserRow, user_id)
        return row.to_domain() if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        row = db.session.execute(select(UserRow).filter_by(email=email)).scalar_one_or_none()
        return row.to_domain() if row else None

    def get_by_wallet(self, wallet_address: str) -> Optional[User]:
        row = db.session.execute(select(UserRow).filter_by(wallet_address=wallet_address)).scalar_one_or_none()
        return row.to_domain() if row else None

    def count(self) -> int:
        return db.session.execute(select(func.count(UserRow.id))).scalar() or 0

    def count_by_auth_method(self) -> dict[str, int]:
        rows = db.session.execute(
            select(UserRow.auth_method, func.count(UserRow.id)).group_by(UserRow.auth_method)
        ).all()
        return {method: int(n) for method, n in rows}


class SQLVoteRepository:
    def put_if_absent(self, vote: Vote) -> bool:
        db.session.add(VoteRow(
            id=vote.id,
            user_id=vote.user_id,
            option_id=vote.option_id,
            created_at=vote.created_at,
        ))
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            return False
        return True

    def get_by_user(self, user_id: str) -> Optional[Vote]:
        row = db.session.execute(select(VoteRow).filter_by(user_id=user_id)).scalar_one_or_none()
        return row.to_domain() if row else None

    def count_by_option(self) -> dict[str, int]:
        rows = db.session.execute(
            select(VoteRow.option_id, func.count(VoteRow.id)).group_by(VoteRow.option_id)
        ).all()
        return {option_id: int(n) for option_id, n in rows}

    def count(self) -> int:
        return db.session.execute(select(func.count(VoteRow.id))).scalar() or 0
