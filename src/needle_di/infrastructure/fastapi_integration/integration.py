from typing import Any, Callable, Dict, Mapping, Optional, Type, TypeVar

from fastapi import FastAPI, Request

from needle_di.application import ServiceBuilder

T = TypeVar("T")

CONFIGURATION_STATE_ATTRIBUTE = "needle_configuration"


def create_fastapi_dependency(
    service_type: Type[T],
    configuration: Optional[Mapping[str, Any]] = None,
) -> Callable[[], T]:
    """Create a FastAPI Depends() callable that builds a service graph.

    Each call builds a new, fully injected instance: nothing is shared
    between requests.

    Args:
        service_type: The service type to build when the dependency is called.
        configuration: Optional configuration for ``@resolve`` members.

    Returns:
        A callable that FastAPI can use with Depends().

    Example:
        >>> get_user_service = create_fastapi_dependency(UserService)
        >>>
        >>> @app.get("/users")
        >>> async def list_users(service: UserService = Depends(get_user_service)):
        ...     return service.list()
    """
    builder = ServiceBuilder(service_type, configuration)

    def dependency() -> T:
        """Build the service."""
        return builder.build()

    return dependency


def install_configuration(app: FastAPI, configuration: Mapping[str, Any]) -> None:
    """Store the configuration used by request dependencies on the application state.

    Args:
        app: The FastAPI application.
        configuration: Configuration for ``@resolve`` members.
    """
    setattr(app.state, CONFIGURATION_STATE_ATTRIBUTE, dict(configuration))


def create_request_dependency(service_type: Type[T]) -> Callable[[Request], T]:
    """Create a FastAPI dependency that builds with the application configuration.

    Requires ``install_configuration`` to have been called on the application.

    Args:
        service_type: The service type to build.

    Returns:
        A callable that builds from the configuration installed on the app.

    Example:
        >>> install_configuration(app, {"prenom": "Fabien"})
        >>> get_name_service = create_request_dependency(NameService)
        >>>
        >>> @app.get("/hello")
        >>> async def hello(service: NameService = Depends(get_name_service)):
        ...     return {"message": f"Hello, {service.prenom}"}
    """

    def request_dependency(request: Request) -> T:
        """Build the service with the configuration installed on the app."""
        configuration: Optional[Dict[str, Any]] = getattr(request.app.state, CONFIGURATION_STATE_ATTRIBUTE, None)
        if configuration is None:
            raise RuntimeError(
                "Application has no service configuration. Did you forget to call install_configuration?"
            )
        return ServiceBuilder(service_type, configuration).build()

    return request_dependency
