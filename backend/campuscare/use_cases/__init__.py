"""
CampusCare Backend — Use Cases
================================

One class per business operation. Each is constructed with the
repositories/services it needs and exposes a single `async execute(...)`.
Route handlers build them through the providers in `campuscare.dependencies`;
unit tests build them directly with AsyncMock collaborators.
"""
