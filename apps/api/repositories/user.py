"""User repository."""

from apps.api.models.user import User
from apps.api.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self):
        super().__init__(User)


# Singleton instance: import and use this directly
user_repo = UserRepository()
