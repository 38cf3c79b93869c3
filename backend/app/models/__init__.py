from app.models.birthday_job import BirthdayJob
from app.models.user import User

__all__ = [
    "BirthdayJob",
    "User",
]
