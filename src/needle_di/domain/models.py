from typing import Any, Callable, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator

from needle_di.domain.enums import Marking, SiteKind
from needle_di.domain.exceptions import CyclicDependencyError


class InjectionSite(BaseModel):
    """Value object describing one member that receives a value during a build.

    Sites are derived from live class metadata on every visit and never cached.

    Attributes:
        kind: Constructor parameter, setter or field.
        owner: The class declaring the member.
        name: Parameter, setter or field name.
        position: Constructor parameter index, ``None`` for setters and fields.
        target_type: Type to inject, ``None`` when the member has no type hint.
        marking: Whether the value is built or looked up in configuration.
        key: Configuration key for resolve sites.
        member: The underlying function for constructor and setter sites.
        has_default: Whether a constructor parameter declares a default value.
        default: The declared default of a constructor parameter, if any.
        positional_only: Whether a constructor parameter must be passed positionally.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: SiteKind = Field(..., description="Kind of member receiving the value.")
    owner: Type = Field(..., description="Class declaring the member.")
    name: str = Field(..., description="Name of the parameter, setter or field.")
    position: Optional[int] = Field(default=None, description="Constructor parameter index.")
    target_type: Optional[Any] = Field(default=None, description="Type to inject.")
    marking: Marking = Field(..., description="How the value is obtained.")
    key: Optional[str] = Field(default=None, description="Configuration key for resolve sites.")
    member: Optional[Callable[..., Any]] = Field(default=None, description="Underlying function, if any.")
    has_default: bool = Field(default=False, description="Whether a constructor parameter has a default.")
    default: Optional[Any] = Field(default=None, description="Declared default of a constructor parameter.")
    positional_only: bool = Field(default=False, description="Whether a constructor parameter is positional-only.")


class BuildContext(BaseModel):
    """State shared by every recursive call spawned from one root build.

    Holds the Dependency Set used for cycle detection and the configuration
    store consulted by resolve sites. A new context is created for every root
    build and is never reused across builds.

    Attributes:
        dependencies: Types currently being built along the active path, in entry order.
        configuration: Key/value store for resolvable members.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    dependencies: List[Type] = Field(
        default_factory=list,
        description="Types currently being built, in entry order.",
    )
    configuration: Dict[str, Any] = Field(
        default_factory=dict,
        description="Configuration store for resolvable members.",
    )

    @field_validator("configuration")
    @classmethod
    def _copy_configuration(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        return dict(value)

    def enter(self, service_type: Type) -> None:
        """Add a type to the dependency set.

        Args:
            service_type: The type about to be built.

        Raises:
            CyclicDependencyError: If the type is already being built.
        """
        if service_type in self.dependencies:
            raise CyclicDependencyError(service_type, self.dependencies)
        self.dependencies.append(service_type)

    def leave(self, service_type: Type) -> None:
        """Remove a type from the dependency set once its build is over."""
        if self.dependencies and self.dependencies[-1] is service_type:
            self.dependencies.pop()

    def lookup(self, key: str) -> tuple[bool, Any]:
        """Look up a configuration key, telling a missing key apart from a ``None`` value."""
        if key in self.configuration:
            return True, self.configuration[key]
        return False, None
