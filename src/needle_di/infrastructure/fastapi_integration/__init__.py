"""
FastAPI integration module.

Provides helpers for building needle-di services from FastAPI dependencies.
"""

from .integration import (
    create_fastapi_dependency,
    create_request_dependency,
    install_configuration,
)

__all__ = [
    "create_fastapi_dependency",
    "create_request_dependency",
    "install_configuration",
]
