"""
Domain layer - Core business logic and models.

This layer contains the markers, models and error taxonomy of the service builder.
It has no dependencies on other layers.
"""

from .enums import Marking, SiteKind
from .exceptions import (
    CyclicDependencyError,
    InjectionError,
    InjectionFailedError,
    InstantiationFailedError,
    NestedInjectionError,
    NotASetterError,
    NotAServiceError,
    UnresolvablePropertyError,
    UnresolvableTypeHintError,
)
from .interfaces import IBuilder, IConfigurable, IMemberIntrospector, IResolver
from .markers import Inject, Resolve, Service, inject, resolve, service
from .models import BuildContext, InjectionSite

__all__ = [
    # Enums
    "Marking",
    "SiteKind",
    # Exceptions
    "InjectionError",
    "NotAServiceError",
    "CyclicDependencyError",
    "InstantiationFailedError",
    "NotASetterError",
    "UnresolvablePropertyError",
    "UnresolvableTypeHintError",
    "InjectionFailedError",
    "NestedInjectionError",
    # Interfaces
    "IBuilder",
    "IConfigurable",
    "IMemberIntrospector",
    "IResolver",
    # Markers
    "Service",
    "Inject",
    "Resolve",
    "service",
    "inject",
    "resolve",
    # Models
    "BuildContext",
    "InjectionSite",
]
