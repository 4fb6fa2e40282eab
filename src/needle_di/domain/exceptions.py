from typing import Any, List, Optional, Type

INSTANTIATION_FAILED = "Unable to instantiate {} service."
CYCLIC_DEPENDENCY = "Class {} has already been entered. Seems there is a cyclic dependency. Dependency graph: {}"
INJECTION_FAILED = "Unable to inject a matching instance in member {}."
NOT_A_SERVICE = "Could not inject a non-service type. Decorate {} with @service."
NESTED_FIELD = "Unable to create the dependency instance to inject in field {}."
NESTED_ARGUMENT = "Unable to create the dependency instance to inject in argument {} of the constructor {}."
NESTED_SETTER = "Unable to create the dependency instance to inject with the method {}."
NOT_A_SETTER = "The method {} must be a setter."
UNRESOLVABLE = "The member {} cannot be resolved. No parameter with key '{}' was found in the configuration."
UNRESOLVABLE_HINT = "Cannot determine the type to inject in member {}: {}."


def _type_name(value: Any) -> str:
    return getattr(value, "__name__", repr(value))


class InjectionError(Exception):
    """Base exception for errors raised while building a service graph."""


class NotAServiceError(InjectionError):
    """Raised when a requested or injected type lacks the @service marking.

    Attributes:
        service_type: The type that is not a service.
    """

    def __init__(self, service_type: Any) -> None:
        self.service_type = service_type
        super().__init__(NOT_A_SERVICE.format(_type_name(service_type)))


class CyclicDependencyError(InjectionError):
    """Raised when a type is entered twice along the same build path.

    Attributes:
        cycle_type: The type that closed the cycle.
        dependencies: Types already entered when the cycle was detected, in order.
    """

    def __init__(self, cycle_type: Type, dependencies: List[Type]) -> None:
        self.cycle_type = cycle_type
        self.dependencies = list(dependencies)
        graph = " -> ".join(_type_name(cls) for cls in self.dependency_chain)
        super().__init__(CYCLIC_DEPENDENCY.format(_type_name(cycle_type), graph))

    @property
    def dependency_chain(self) -> List[Type]:
        """The cycle itself, from the first occurrence of the closing type back to it."""
        if self.cycle_type in self.dependencies:
            start = self.dependencies.index(self.cycle_type)
            return self.dependencies[start:] + [self.cycle_type]
        return self.dependencies + [self.cycle_type]


class InstantiationFailedError(InjectionError):
    """Raised when a service type cannot be instantiated.

    This occurs when:
    - The class needs constructor arguments but has no @inject constructor.
    - The constructor itself raises.
    - An injectable constructor parameter lacks a type hint.

    Attributes:
        service_type: The type that could not be instantiated.
        reason: Optional reason for the failure.
    """

    def __init__(self, service_type: Type, reason: Optional[str] = None) -> None:
        self.service_type = service_type
        self.reason = reason
        message = INSTANTIATION_FAILED.format(_type_name(service_type))
        if reason:
            message += f" Reason: {reason}"
        super().__init__(message)


class NotASetterError(InjectionError):
    """Raised when a marked method does not have the shape of a setter.

    Attributes:
        description: Human readable signature of the offending method.
    """

    def __init__(self, description: str) -> None:
        self.description = description
        super().__init__(NOT_A_SETTER.format(description))


class UnresolvablePropertyError(InjectionError):
    """Raised when a configuration key is missing for a resolvable member.

    Attributes:
        name: Name of the member (setter or field).
        key: The configuration key that was looked up.
    """

    def __init__(self, name: str, key: str) -> None:
        self.name = name
        self.key = key
        super().__init__(UNRESOLVABLE.format(name, key))


class InjectionFailedError(InjectionError):
    """Raised when assigning a value through a setter or a field fails.

    Attributes:
        name: Name of the member that could not be assigned.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(INJECTION_FAILED.format(name))


class NestedInjectionError(InjectionError):
    """Wraps an error raised while building a dependency one level down.

    Each level of the graph wraps the error of the level below exactly once,
    so the outermost error carries the member path from the root to the fault.

    Attributes:
        member: Description of the member being injected at this level.
        cause: The wrapped error.
    """

    def __init__(self, message: str, member: str, cause: InjectionError) -> None:
        self.member = member
        self.cause = cause
        super().__init__(message)

    @classmethod
    def for_argument(cls, index: int, constructor: str, cause: InjectionError) -> "NestedInjectionError":
        return cls(NESTED_ARGUMENT.format(index, constructor), f"argument {index} of {constructor}", cause)

    @classmethod
    def for_setter(cls, method: str, cause: InjectionError) -> "NestedInjectionError":
        return cls(NESTED_SETTER.format(method), method, cause)

    @classmethod
    def for_field(cls, owner: Type, name: str, cause: InjectionError) -> "NestedInjectionError":
        qualified = f"{_type_name(owner)}.{name}"
        return cls(NESTED_FIELD.format(qualified), qualified, cause)

    @property
    def root_cause(self) -> InjectionError:
        """The innermost error, after unwrapping every nesting level."""
        error: InjectionError = self
        while isinstance(error, NestedInjectionError):
            error = error.cause
        return error

    @property
    def path(self) -> List[str]:
        """Members traversed from the root build down to the failing one."""
        members = []
        error: InjectionError = self
        while isinstance(error, NestedInjectionError):
            members.append(error.member)
            error = error.cause
        return members


class UnresolvableTypeHintError(InjectionError):
    """Raised when the type to inject in a marked member cannot be determined.

    This occurs when the member has no type hint, or when its hint names
    something that cannot be found from the module or the class, such as a
    class defined inside a function in a module with postponed annotations.

    Attributes:
        member: Qualified name of the member, as ``Owner.name``.
        annotation: The hint that could not be evaluated, ``None`` when missing.
    """

    def __init__(self, member: str, annotation: Any = None) -> None:
        self.member = member
        self.annotation = annotation
        if annotation is None:
            reason = "it has no type hint"
        else:
            text = getattr(annotation, "__forward_arg__", annotation)
            reason = f"its type hint '{text}' cannot be evaluated"
        super().__init__(UNRESOLVABLE_HINT.format(member, reason))
