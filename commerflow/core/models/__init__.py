"""
Shared models.

- domain: enums used by both entities and API schemas
- io: request/response schemas
"""
