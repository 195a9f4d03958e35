"""
CampusCare Backend — Domain Layer
===================================

Entities, value objects and the role enumeration. Nothing in this package
imports SQLAlchemy or FastAPI.
"""
