from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Type, TypeVar

from needle_di.domain.models import BuildContext, InjectionSite

T = TypeVar("T")


class IBuilder(ABC, Generic[T]):
    """Abstract interface for an object that builds instances of ``T``."""

    @abstractmethod
    def build(self) -> T:
        """Build an instance of ``T``.

        Raises:
            InjectionError: If the build process fails.
        """


class IConfigurable(ABC):
    """Abstract interface for an object carrying a key/value configuration."""

    @abstractmethod
    def get_configuration(self) -> Dict[str, Any]:
        """Return the configuration store of the object."""


class IMemberIntrospector(ABC):
    """Abstract read-only query surface over class and member markings."""

    @abstractmethod
    def is_service(self, cls: Any) -> bool:
        """Tell whether ``cls`` is marked as a service."""

    @abstractmethod
    def is_inject_marked(self, member: Any) -> bool:
        """Tell whether a constructor, method or field annotation is marked for injection."""

    @abstractmethod
    def is_resolve_marked(self, member: Any) -> bool:
        """Tell whether a method or field annotation is marked for configuration lookup."""

    @abstractmethod
    def member_name_from_setter(self, name: Optional[str]) -> str:
        """Derive the member name targeted by a setter name, or an empty string."""

    @abstractmethod
    def describe(self, method: Callable[..., Any]) -> str:
        """Return a human readable signature of ``method`` for diagnostics."""

    @abstractmethod
    def find_injectable_constructor(self, cls: Type) -> Optional[Callable[..., Any]]:
        """Return the ``__init__`` declared on ``cls`` and marked for injection, if any."""

    @abstractmethod
    def is_setter_shaped(self, cls: Type, method: Callable[..., Any]) -> bool:
        """Tell whether ``method`` is a single-argument setter matching a field of ``cls``."""

    @abstractmethod
    def constructor_sites(self, cls: Type) -> List[InjectionSite]:
        """Return the constructor parameter sites of ``cls`` in declaration order."""

    @abstractmethod
    def setter_sites(self, cls: Type) -> List[InjectionSite]:
        """Return the marked setter sites of ``cls`` in declaration order."""

    @abstractmethod
    def field_sites(self, cls: Type) -> List[InjectionSite]:
        """Return the marked field sites of ``cls`` in declaration order."""


class IResolver(ABC):
    """Abstract interface for the dependency-graph resolution engine."""

    @abstractmethod
    def build(self, service_type: Type[T], configuration: Optional[Mapping[str, Any]] = None) -> T:
        """Build a fully injected instance from a fresh build context.

        Args:
            service_type: The root service type.
            configuration: Optional store for resolvable members.

        Returns:
            Instance with all dependencies and properties injected.
        """

    @abstractmethod
    def resolve_service(self, service_type: Type[T], context: BuildContext) -> T:
        """Build an instance within an existing build context.

        Args:
            service_type: The service type to build.
            context: Context shared with the whole root build.
        """
