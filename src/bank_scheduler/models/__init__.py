"""Pydantic request/response models and domain enumerations."""
