"""
needle-di: Marker-based Dependency Injection builder with constructor, setter and field injection.

Public API exports for the needle-di package.
"""

# Application exports
from needle_di.application.builder import ServiceBuilder, build
from needle_di.application.configurator import Configurator

# Domain exports
from needle_di.domain.exceptions import (
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
from needle_di.domain.markers import Inject, Resolve, inject, resolve, service

__version__ = "0.1.0"

__all__ = [
    # Builder
    "ServiceBuilder",
    "Configurator",
    "build",
    # Markers
    "service",
    "inject",
    "resolve",
    "Inject",
    "Resolve",
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
]
