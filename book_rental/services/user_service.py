from book_rental.errors import NotFoundError
from book_rental.repositories.user_repo import UserRepo

class UserService:
    @staticmethod
    def get_user_by_id(user_id: int):
        user = UserRepo.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User not found with id: {user_id}")
        return user

    @staticmethod
    def to_view(user) -> dict:
        return {
            "id": user.id,
            "name": user.name,
            "username": user.username,
            "email": user.email,
            "role": user.role,
        }
