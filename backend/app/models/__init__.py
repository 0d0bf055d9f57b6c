from .category import Category
from .service import Service
from .submission import Submission
from .feedback import Feedback

__all__ = [
    "Category",
    "Service",
    "Submission",
    "Feedback",
]
