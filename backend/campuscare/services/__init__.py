"""
CampusCare Backend — Services Layer
=====================================

Cross-cutting helpers that use cases compose with repositories:

    - AuthService: bcrypt password hashing, JWT access/refresh tokens
    - NotificationService: fire-and-forget in-app notifications
"""
