from enum import Enum


class Marking(str, Enum):
    """Defines how an injection site receives its value.

    Attributes:
        INJECT: Value is a recursively built service instance.
        RESOLVE: Value is looked up in the build configuration.
    """

    INJECT = "inject"
    RESOLVE = "resolve"

    def __str__(self) -> str:
        return self.value


class SiteKind(str, Enum):
    """Kind of member an injection site is attached to."""

    CONSTRUCTOR = "constructor"
    SETTER = "setter"
    FIELD = "field"

    def __str__(self) -> str:
        return self.value
