"""
HTTP service and SQL storage around the breachscan ingestion pipeline.
"""
