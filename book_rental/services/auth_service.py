from werkzeug.security import generate_password_hash, check_password_hash
from flask_jwt_extended import create_access_token

from book_rental.errors import ServiceError
from book_rental.models.user import User
from book_rental.repositories.user_repo import UserRepo

class AuthService:
    @staticmethod
    def register(name: str, username: str, email: str, password: str, role: str = "user"):
        if UserRepo.get_by_username(username) or UserRepo.get_by_email(email):
            raise ServiceError("Username or email already registered")

        user = User(
            name=name,
            username=username,
            email=email,
            password_hash=generate_password_hash(password),
            role=role
        )
        UserRepo.create(user)
        return user

    @staticmethod
    def login(username: str, password: str):
        user = UserRepo.get_by_username(username)
        if not user or not check_password_hash(user.password_hash, password):
            raise ServiceError("Invalid username or password")

        token = AuthService.issue_token(user)
        return token, user

    @staticmethod
    def issue_token(user: User) -> str:
        return create_access_token(
            identity=str(user.id),
            additional_claims={"role": user.role, "username": user.username}
        )
