from typing import TYPE_CHECKING, Any, Generic, Mapping, Optional, TypeVar

if TYPE_CHECKING:
    from needle_di.application.builder import ServiceBuilder

T = TypeVar("T")


class Configurator(Generic[T]):
    """Fills in the configuration of a ``ServiceBuilder`` in a chained way.

    Obtained from ``ServiceBuilder.configure()``; ``done()`` hands the builder back.

    Example:
        >>> service = (
        ...     ServiceBuilder.instance(NameService)
        ...     .configure()
        ...     .put("prenom", "Fabien")
        ...     .done()
        ...     .build()
        ... )
    """

    def __init__(self, builder: "ServiceBuilder[T]", configuration: Optional[Mapping[str, Any]] = None) -> None:
        """Initialize the configurator.

        Args:
            builder: The builder being configured.
            configuration: Optional initial entries merged into the builder configuration.
        """
        self._builder = builder
        if configuration:
            self.put_all(configuration)

    def put(self, key: str, value: Any) -> "Configurator[T]":
        """Add or replace a configuration entry."""
        self._builder.get_configuration()[key] = value
        return self

    def put_all(self, configuration: Mapping[str, Any]) -> "Configurator[T]":
        """Add or replace several configuration entries."""
        self._builder.get_configuration().update(configuration)
        return self

    def done(self) -> "ServiceBuilder[T]":
        """Return the builder being configured."""
        return self._builder
