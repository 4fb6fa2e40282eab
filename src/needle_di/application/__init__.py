"""
Application layer - Use cases and orchestration.

This layer contains the introspector, the resolution engine and the builder facade.
It depends only on the Domain layer.
"""

from .builder import ServiceBuilder, build
from .configurator import Configurator
from .introspector import MemberIntrospector
from .resolver import ServiceResolver

__all__ = [
    "ServiceBuilder",
    "Configurator",
    "MemberIntrospector",
    "ServiceResolver",
    "build",
]
