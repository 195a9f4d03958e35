"""
CampusCare Backend — Application Package
==========================================

Campus facilities, wellness and cafeteria API.

Layers (outermost first):

    ┌─────────────────────────────────────┐
    │   routes + dependencies (HTTP)      │  ← status codes, auth, role gates
    ├─────────────────────────────────────┤
    │   use_cases                         │  ← one class per operation
    ├─────────────────────────────────────┤
    │   services  │  domain               │  ← JWT/bcrypt, notifications │ entities, rules
    ├─────────────────────────────────────┤
    │   repositories (ports + adapters)   │  ← SQLAlchemy, error translation
    ├─────────────────────────────────────┤
    │   models + database                 │  ← ORM tables, engine, sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
