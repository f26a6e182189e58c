"""
CRUD operations (Create, Read, Update, Delete) for database models.

This layer provides a clean separation between API routes and database operations,
following the Repository pattern.
"""

from talentdesk.crud import admin_user, job_post, applicant, pipeline

__all__ = ["admin_user", "job_post", "applicant", "pipeline"]
