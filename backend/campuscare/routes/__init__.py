"""
CampusCare Backend — Route Handlers (HTTP layer)

Routers parse requests, check roles through `campuscare.dependencies`, call
one use case and convert the result to a response schema. No business rules
live here.
"""
