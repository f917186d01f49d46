from language_platform.models.user import User
from language_platform.models.lesson import Lesson
from language_platform.models.progress import LearnerProgress

__all__ = ["User", "Lesson", "LearnerProgress"]
