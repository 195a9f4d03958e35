"""
CampusCare Backend — Repositories
===================================

Ports (abstract interfaces) live in `ports.py`; each `*_repository.py`
module holds the SQLAlchemy adapter for one aggregate.
"""
