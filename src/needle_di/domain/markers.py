from typing import Any, Callable, Optional, TypeVar, Union, overload

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])

SERVICE_ATTRIBUTE = "__needle_service__"
INJECT_ATTRIBUTE = "__needle_inject__"
RESOLVE_ATTRIBUTE = "__needle_resolve__"


class Service(BaseModel):
    """Marker stored on a class that the builder is allowed to construct."""

    model_config = ConfigDict(frozen=True)


class Inject(BaseModel):
    """Marker for a recursive-dependency injection point.

    Used as a decorator payload on ``__init__`` and setters, and directly as
    ``Annotated`` metadata on fields::

        auth: Annotated[AuthService, Inject()]
    """

    model_config = ConfigDict(frozen=True)


class Resolve(BaseModel):
    """Marker for a configuration-value injection point.

    Attributes:
        key: Configuration key to look up. Empty means the member name is used.
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(default="", description="Configuration key, defaults to the member name.")

    def __init__(self, key: str = "", **data: Any) -> None:
        super().__init__(key=key, **data)


def service(cls: T) -> T:
    """Mark a class as a service.

    The marking is stored on the class itself and is not inherited by subclasses.

    Example:
        >>> @service
        ... class AuthService:
        ...     pass
    """
    setattr(cls, SERVICE_ATTRIBUTE, Service())
    return cls


def inject(func: F) -> F:
    """Mark ``__init__`` or a setter as an injection point.

    Example:
        >>> @service
        ... class DataService:
        ...     @inject
        ...     def __init__(self, auth: AuthService):
        ...         self.auth = auth
    """
    setattr(func, INJECT_ATTRIBUTE, Inject())
    return func


@overload
def resolve(key: F) -> F: ...


@overload
def resolve(key: Optional[str] = None) -> Callable[[F], F]: ...


def resolve(key: Union[F, Optional[str]] = None) -> Union[F, Callable[[F], F]]:
    """Mark a setter as a configuration property.

    Can be used bare, in which case the key is inferred from the setter name,
    or with an explicit key.

    Example:
        >>> @service
        ... class NameService:
        ...     prenom: str
        ...
        ...     @resolve
        ...     def set_prenom(self, prenom: str) -> None:
        ...         self.prenom = prenom
        ...
        ...     @resolve("app.port")
        ...     def set_port(self, port: int) -> None:
        ...         self.port = port
    """
    if callable(key):
        setattr(key, RESOLVE_ATTRIBUTE, Resolve())
        return key

    def decorator(func: F) -> F:
        setattr(func, RESOLVE_ATTRIBUTE, Resolve(key or ""))
        return func

    return decorator
