from sqlalchemy.orm import Session

from grocery.data.models.user import UserModel
from grocery.domain.exceptions import NotFoundError, UnauthorizedError, ValidationError
from grocery.domain.schemas import LoginIn, RegisterIn
from grocery.repos.user_repo import UserRepo
from grocery.utils.logging import get_logger
from grocery.utils.security import create_access_token, hash_password, verify_password

logger = get_logger(__name__)

STAFF_ROLES = ("seller", "admin")


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def register(self, payload: RegisterIn) -> tuple[UserModel, str]:
        if self.repo.get_by_email(payload.email):
            raise ValidationError("Email is already registered")

        user = UserModel(
            full_name=payload.full_name.strip(),
            email=payload.email.lower(),
            phone_number=payload.phone_number,
            password_hash=hash_password(payload.password),
            role="customer",
            status="Active",
        )
        created = self.repo.create_user(user)
        logger.info("user_registered", user_id=created.id)
        return created, create_access_token(created.id, created.role)

    def login(self, payload: LoginIn) -> tuple[UserModel, str]:
        user = self.repo.get_by_email(payload.email)
        if not user or not verify_password(payload.password, user.password_hash):
            raise UnauthorizedError("Invalid email or password")
        if user.status != "Active":
            raise UnauthorizedError("Account is inactive")
        return user, create_access_token(user.id, user.role)

    def get_user(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def create_staff_user(self, full_name: str, email: str, password: str, role: str) -> UserModel:
        """Used by the seed script; the HTTP API only ever registers customers."""
        if role not in STAFF_ROLES:
            raise ValidationError(f"Invalid staff role: {role}")
        existing = self.repo.get_by_email(email)
        if existing:
            return existing
        user = UserModel(
            full_name=full_name,
            email=email.lower(),
            password_hash=hash_password(password),
            role=role,
            status="Active",
        )
        return self.repo.create_user(user)
