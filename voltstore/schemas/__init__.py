"""
Pydantic request/response models and domain types for the VoltStore backend.
"""
