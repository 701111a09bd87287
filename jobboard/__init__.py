"""
Job Board API
A job-board backend over MongoDB.

Architecture:
- MongoDB: users, companies, job categories, jobs, applications
- Cloudinary: object storage for profile images and resumes
- JWT in an http-only cookie for authentication
"""

__version__ = "1.0.0"
