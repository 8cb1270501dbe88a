"""
SQLModel schemas for database persistence.
"""

from .breach_record import BreachRecordRow
from .processing_job import ProcessingJobRow

__all__ = ["BreachRecordRow", "ProcessingJobRow"]
