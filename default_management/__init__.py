"""
Default Management - Default Determination Workflow Service

A FastAPI-based service for submitting, approving and reversing
("rebirth") default determinations against customer accounts.
"""

__version__ = "0.1.0"
