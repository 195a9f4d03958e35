"""
CampusCare Backend — Pydantic Request/Response Schemas

The API contract. Schemas are separate from the ORM models and from the
domain entities; routes convert entities into these before returning.
"""
