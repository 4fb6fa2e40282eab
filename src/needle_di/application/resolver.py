import logging
from typing import Any, Dict, ForwardRef, List, Mapping, Optional, Type, TypeVar

from needle_di.application.introspector import MemberIntrospector
from needle_di.domain import (
    BuildContext,
    IMemberIntrospector,
    IResolver,
    InjectionError,
    InjectionFailedError,
    InjectionSite,
    InstantiationFailedError,
    Marking,
    NestedInjectionError,
    NotASetterError,
    NotAServiceError,
    SiteKind,
    UnresolvablePropertyError,
    UnresolvableTypeHintError,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ServiceResolver(IResolver):
    """Builds service instances by walking their dependency graph depth-first.

    An instance is created through its ``@inject`` constructor (or without
    arguments), then its marked setters run in declaration order, then its
    marked fields are assigned in declaration order. Every dependency is built
    recursively with the same build context, so cycles are detected on
    re-entry and configuration is shared across the whole graph.

    Nothing is cached: each injection site receives its own instance.

    Attributes:
        _introspector: Query surface over class and member markings.
    """

    def __init__(self, introspector: Optional[IMemberIntrospector] = None) -> None:
        """Initialize the resolver.

        Args:
            introspector: Optional introspector, defaults to ``MemberIntrospector``.
        """
        self._introspector: IMemberIntrospector = introspector or MemberIntrospector()

    def build(self, service_type: Type[T], configuration: Optional[Mapping[str, Any]] = None) -> T:
        """Build a service from a fresh build context.

        Args:
            service_type: The root service type.
            configuration: Optional store for ``@resolve`` members.

        Returns:
            Fully injected instance of ``service_type``.

        Raises:
            NotAServiceError: If ``service_type`` is not decorated with ``@service``.
            CyclicDependencyError: If ``service_type`` depends on itself.
            NestedInjectionError: If building one of its dependencies failed.

        Example:
            >>> resolver = ServiceResolver()
            >>> name_service = resolver.build(NameService, {"prenom": "Fabien"})
        """
        context = BuildContext(configuration=dict(configuration or {}))
        return self.resolve_service(service_type, context)

    def resolve_service(self, service_type: Type[T], context: BuildContext) -> T:
        if not self._introspector.is_service(service_type):
            raise NotAServiceError(service_type)

        context.enter(service_type)
        try:
            logger.debug("Building %s", service_type.__name__)
            instance = self._construct(service_type, context)
            self._inject_setters(service_type, instance, context)
            self._inject_fields(service_type, instance, context)
            return instance
        finally:
            context.leave(service_type)

    def _construct(self, service_type: Type[T], context: BuildContext) -> T:
        args: List[Any] = []
        kwargs: Dict[str, Any] = {}

        for site in self._introspector.constructor_sites(service_type):
            if isinstance(site.target_type, (str, ForwardRef)):
                raise UnresolvableTypeHintError(self._member_label(site), site.target_type)
            if site.target_type is None and not site.has_default:
                raise InstantiationFailedError(
                    service_type,
                    f"Parameter '{site.name}' lacks type hint and has no default value.",
                )
            # Unhinted and non-service parameters with defaults keep their default
            if site.has_default and not self._introspector.is_service(site.target_type):
                if site.positional_only:
                    args.append(site.default)
                continue

            value = self._build_dependency(site, context)
            if site.positional_only:
                args.append(value)
            else:
                kwargs[site.name] = value

        try:
            return service_type(*args, **kwargs)
        except InjectionError:
            raise
        except Exception as e:
            raise InstantiationFailedError(service_type, str(e)) from e

    def _inject_setters(self, service_type: Type, instance: Any, context: BuildContext) -> None:
        for site in self._introspector.setter_sites(service_type):
            if not self._introspector.is_setter_shaped(service_type, site.member):
                raise NotASetterError(f"{service_type.__name__}.{self._introspector.describe(site.member)}")

            member_name = self._introspector.member_name_from_setter(site.name)
            value = self._site_value(site, member_name, context)
            logger.debug("Injecting %s.%s (%s)", service_type.__name__, site.name, site.marking)
            try:
                site.member(instance, value)
            except Exception as e:
                raise InjectionFailedError(member_name) from e

    def _inject_fields(self, service_type: Type, instance: Any, context: BuildContext) -> None:
        for site in self._introspector.field_sites(service_type):
            value = self._site_value(site, site.name, context)
            logger.debug("Injecting %s.%s (%s)", service_type.__name__, site.name, site.marking)
            try:
                setattr(instance, site.name, value)
            except Exception as e:
                raise InjectionFailedError(site.name) from e

    def _site_value(self, site: InjectionSite, member_name: str, context: BuildContext) -> Any:
        if site.marking is Marking.INJECT:
            return self._build_dependency(site, context)

        found, value = context.lookup(site.key)
        if not found:
            raise UnresolvablePropertyError(member_name, site.key)
        return value

    def _build_dependency(self, site: InjectionSite, context: BuildContext) -> Any:
        if site.target_type is None or isinstance(site.target_type, (str, ForwardRef)):
            raise UnresolvableTypeHintError(self._member_label(site), site.target_type)
        if not self._introspector.is_service(site.target_type):
            raise NotAServiceError(site.target_type)

        try:
            return self.resolve_service(site.target_type, context)
        except InjectionError as e:
            raise self._nest(site, e) from e

    def _nest(self, site: InjectionSite, error: InjectionError) -> NestedInjectionError:
        owner = site.owner.__name__
        if site.kind is SiteKind.CONSTRUCTOR:
            return NestedInjectionError.for_argument(
                site.position, f"{owner}.{self._introspector.describe(site.member)}", error
            )
        if site.kind is SiteKind.SETTER:
            return NestedInjectionError.for_setter(f"{owner}.{self._introspector.describe(site.member)}", error)
        return NestedInjectionError.for_field(site.owner, site.name, error)

    @staticmethod
    def _member_label(site: InjectionSite) -> str:
        if site.kind is SiteKind.CONSTRUCTOR:
            return f"{site.owner.__name__}.__init__({site.name})"
        return f"{site.owner.__name__}.{site.name}"
