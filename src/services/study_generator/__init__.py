"""Study generator service module."""

from src.services.study_generator.router import router
from src.services.study_generator.service import study_generator

__all__ = ["router", "study_generator"]
