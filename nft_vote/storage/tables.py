from datetime import datetime
from ..extensions import db
from ..models import User, Vote, VerificationCode
from ..models.user import ROLE_VOTER


class UserRow(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(40), primary_key=True)
    email = db.Column(db.String(255), nullable=True, unique=True, index=True)
    wallet_address = db.Column(db.String(128), nullable=True, unique=True, index=True)

    auth_method = db.Column(db.String(10), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=ROLE_VOTER)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    @classmethod
    def from_domain(cls, user: User) -> "UserRow":
        return cls(
            id=user.id,
            email=user.email,
            wallet_address=user.wallet_address,
            auth_method=user.auth_method,
            role=user.role,
            created_at=user.created_at,
        )

    def to_domain(self) -> User:
        return User(
            id=self.id,
            email=self.email,
            wallet_address=self.wallet_address,
            auth_method=self.auth_method,
            role=self.role,
            created_at=self.created_at,
        )


class VoteRow(db.Model):
    __tablename__ = "votes"

    id = db.Column(db.String(40), primary_key=True)
    user_id = db.Column(db.String(40), nullable=False)
    option_id = db.Column(db.String(40), nullable=False, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        # One vote per user
        db.UniqueConstraint("user_id", name="uq_votes_user"),
    )

    def to_domain(self) -> Vote:
        return Vote(id=self.id, user_id=self.user_id, option_id=self.option_id, created_at=self.created_at)


class VerificationCodeRow(db.Model):
    __tablename__ = "verification_codes"

    email = db.Column(db.String(255), primary_key=True)
    code_hash = db.Column(db.String(255), nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)
    attempts = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_domain(self) -> VerificationCode:
        return VerificationCode(
            email=self.email,
            code_hash=self.code_hash,
            expires_at=self.expires_at,
            attempts=self.attempts,
        )
