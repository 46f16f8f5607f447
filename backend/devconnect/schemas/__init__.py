"""API Schemas — Pydantic models for request validation and response shaping.

Invariants:
    - Schemas never touch the database
    - All wire names are camelCase (see common.CamelModel)
"""
