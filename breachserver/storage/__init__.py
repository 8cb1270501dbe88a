"""
SQLModel-backed storage for processing jobs and breach records.
"""
