"""
Job Search App
A job-board backend: users, companies, job postings and applications.

Architecture:
- MongoDB: users, companies, jobs, applications
- Cloudinary: resume files
- SMTP: password-reset OTPs
"""

__version__ = "1.0.0"
