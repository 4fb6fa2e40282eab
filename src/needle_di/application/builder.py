from typing import Any, Dict, Mapping, Optional, Type, TypeVar

from needle_di.application.configurator import Configurator
from needle_di.application.resolver import ServiceResolver
from needle_di.domain import IBuilder, IConfigurable, IResolver

T = TypeVar("T")


class ServiceBuilder(IBuilder[T], IConfigurable):
    """Builds instances of one root service type.

    Keeps the configuration used by ``@resolve`` members. Each ``build()``
    call starts from a fresh build context holding a copy of that
    configuration, so builds never share cycle-detection state.

    Attributes:
        _service_type: The root service type.
        _configuration: Configuration store handed to every build.
        _resolver: The resolution engine.

    Example:
        >>> builder = ServiceBuilder(UserService)
        >>> user_service = builder.build()
    """

    def __init__(
        self,
        service_type: Type[T],
        configuration: Optional[Mapping[str, Any]] = None,
        resolver: Optional[IResolver] = None,
    ) -> None:
        """Initialize the builder.

        Args:
            service_type: The root service type to build.
            configuration: Optional initial configuration.
            resolver: Optional resolution engine, defaults to ``ServiceResolver``.
        """
        self._service_type = service_type
        self._configuration: Dict[str, Any] = dict(configuration or {})
        self._resolver: IResolver = resolver or ServiceResolver()

    @classmethod
    def instance(cls, service_type: Type[T]) -> "ServiceBuilder[T]":
        """Create a builder for ``service_type``."""
        return cls(service_type)

    @property
    def service_type(self) -> Type[T]:
        return self._service_type

    def get_configuration(self) -> Dict[str, Any]:
        return self._configuration

    def configure(self, configuration: Optional[Mapping[str, Any]] = None) -> Configurator[T]:
        """Start a chained configuration of this builder.

        Args:
            configuration: Optional entries to merge before chaining.

        Returns:
            A configurator whose ``done()`` returns this builder.
        """
        return Configurator(self, configuration)

    def build(self) -> T:
        """Build a fully injected instance of the root service type.

        Raises:
            InjectionError: If any part of the graph cannot be built.
        """
        return self._resolver.build(self._service_type, self._configuration)


def build(service_type: Type[T], configuration: Optional[Mapping[str, Any]] = None) -> T:
    """Build ``service_type`` with an optional configuration.

    Example:
        >>> user_service = build(UserService)
        >>> name_service = build(NameService, {"prenom": "Fabien"})
    """
    return ServiceBuilder(service_type, configuration).build()
