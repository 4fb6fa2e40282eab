import builtins
import inspect
import logging
import sys
from typing import (
    Annotated,
    Any,
    Callable,
    Dict,
    ForwardRef,
    List,
    Mapping,
    Optional,
    Type,
    Union,
    get_args,
    get_origin,
)

from needle_di.domain import (
    IMemberIntrospector,
    Inject,
    InjectionSite,
    Marking,
    Resolve,
    Service,
    SiteKind,
    UnresolvableTypeHintError,
)
from needle_di.domain.markers import INJECT_ATTRIBUTE, RESOLVE_ATTRIBUTE, SERVICE_ATTRIBUTE

logger = logging.getLogger(__name__)

_EMPTY = inspect.Parameter.empty
_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


class _HintNamespace(dict):
    """Local namespace for evaluating string hints.

    Names found nowhere become ``ForwardRef`` placeholders, so the rest of the
    hint, ``Annotated`` markers included, still evaluates.
    """

    def __init__(self, localns: Mapping[str, Any], globalns: Mapping[str, Any]) -> None:
        super().__init__(localns)
        self._globalns = globalns

    def __missing__(self, key: str) -> Any:
        if key in self._globalns:
            return self._globalns[key]
        if hasattr(builtins, key):
            return getattr(builtins, key)
        return ForwardRef(key)


def _forward_ref_format() -> Any:
    # Deferred annotations (Python 3.14+) raise NameError on access when a name is undefined
    import annotationlib

    return annotationlib.Format.FORWARDREF


class MemberIntrospector(IMemberIntrospector):
    """Answers questions about services and their injection points.

    Reads markings and type hints from the classes as they are at call time.
    Nothing is cached, so the answers always reflect live metadata. Only members
    declared on the class itself are considered, inherited ones are ignored.
    """

    def is_service(self, cls: Any) -> bool:
        return inspect.isclass(cls) and isinstance(vars(cls).get(SERVICE_ATTRIBUTE), Service)

    def is_inject_marked(self, member: Any) -> bool:
        return any(isinstance(marker, Inject) for marker in self._markers(member))

    def is_resolve_marked(self, member: Any) -> bool:
        return any(isinstance(marker, Resolve) for marker in self._markers(member))

    def find_injectable_constructor(self, cls: Type) -> Optional[Callable[..., Any]]:
        """Return the ``__init__`` declared directly on ``cls`` and marked with ``@inject``.

        Returns:
            The constructor function, or ``None`` when the class should be
            instantiated without arguments.
        """
        constructor = vars(cls).get("__init__")
        if inspect.isfunction(constructor) and self.is_inject_marked(constructor):
            return constructor
        return None

    def is_setter_shaped(self, cls: Type, method: Callable[..., Any]) -> bool:
        """Tell whether ``method`` is a setter for a field declared on ``cls``.

        A setter returns nothing, takes exactly one argument besides ``self``
        and targets an annotated field named after it whose type accepts the
        argument type.

        Example:
            >>> class Person:
            ...     first_name: str
            ...     def set_first_name(self, first_name: str) -> None: ...
            >>> MemberIntrospector().is_setter_shaped(Person, Person.set_first_name)
            True
        """
        member_name = self.member_name_from_setter(getattr(method, "__name__", None))
        fields = self._declared_fields(cls)
        if not member_name or member_name not in fields:
            return False

        signature = self._signature(method, cls)
        if signature.return_annotation not in (_EMPTY, None, type(None)):
            return False

        parameters = self._arguments(signature)
        if len(parameters) != 1 or parameters[0].kind in (*_VARIADIC, inspect.Parameter.KEYWORD_ONLY):
            return False

        return self._accepts(fields[member_name], parameters[0].annotation)

    @staticmethod
    def member_name_from_setter(name: Optional[str]) -> str:
        """Derive the member name a setter targets from the setter's name.

        Both naming styles are understood: ``setFirstName`` gives ``firstName``
        and ``set_first_name`` gives ``first_name``.

        Returns:
            The member name, or an empty string if ``name`` is not a setter name.
        """
        if not name or not name.startswith("set"):
            return ""
        rest = name[3:]
        if rest.startswith("_"):
            return rest[1:]
        if not rest:
            return ""
        return rest[0].lower() + rest[1:]

    def describe(self, method: Callable[..., Any]) -> str:
        """Describe a method as ``name(ParamType, ...) : ReturnType``, for diagnostics."""
        signature = self._signature(method)
        arguments = ", ".join(self._type_label(parameter.annotation) for parameter in self._arguments(signature))
        return f"{method.__name__}({arguments}) : {self._type_label(signature.return_annotation)}"

    def constructor_sites(self, cls: Type) -> List[InjectionSite]:
        constructor = self.find_injectable_constructor(cls)
        if constructor is None:
            return []

        sites = []
        for position, parameter in enumerate(self._arguments(self._signature(constructor, cls))):
            # *args and **kwargs are never injected
            if parameter.kind in _VARIADIC:
                continue
            sites.append(
                InjectionSite(
                    kind=SiteKind.CONSTRUCTOR,
                    owner=cls,
                    name=parameter.name,
                    position=position,
                    target_type=self._hint(parameter.annotation),
                    marking=Marking.INJECT,
                    member=constructor,
                    has_default=parameter.default is not _EMPTY,
                    default=None if parameter.default is _EMPTY else parameter.default,
                    positional_only=parameter.kind == inspect.Parameter.POSITIONAL_ONLY,
                )
            )
        return sites

    def setter_sites(self, cls: Type) -> List[InjectionSite]:
        sites = []
        for name, attribute in vars(cls).items():
            if name == "__init__" or not inspect.isfunction(attribute):
                continue

            injectable = self.is_inject_marked(attribute)
            resolvable = self.is_resolve_marked(attribute)
            if not (injectable or resolvable):
                continue
            if injectable and resolvable:
                logger.warning("%s.%s is marked both @inject and @resolve, injecting it", cls.__name__, name)

            parameters = self._arguments(self._signature(attribute, cls))
            target_type = self._hint(parameters[0].annotation) if len(parameters) == 1 else None
            marking = Marking.INJECT if injectable else Marking.RESOLVE
            key = None
            if marking is Marking.RESOLVE:
                key = getattr(attribute, RESOLVE_ATTRIBUTE).key or self.member_name_from_setter(name)

            sites.append(
                InjectionSite(
                    kind=SiteKind.SETTER,
                    owner=cls,
                    name=name,
                    target_type=target_type,
                    marking=marking,
                    key=key,
                    member=attribute,
                )
            )
        return sites

    def field_sites(self, cls: Type) -> List[InjectionSite]:
        """Derive the sites of the ``Inject``/``Resolve`` marked fields declared on ``cls``.

        Raises:
            UnresolvableTypeHintError: If a field annotation cannot be evaluated,
                since its markers cannot be read.
        """
        sites = []
        for name, annotation in self._declared_fields(cls).items():
            if isinstance(annotation, str):
                raise UnresolvableTypeHintError(f"{cls.__name__}.{name}", annotation)
            markers = self._markers(annotation)
            injectable = any(isinstance(marker, Inject) for marker in markers)
            resolve_marker = next((marker for marker in markers if isinstance(marker, Resolve)), None)
            if not injectable and resolve_marker is None:
                continue
            if injectable and resolve_marker is not None:
                logger.warning("%s.%s is marked both Inject and Resolve, injecting it", cls.__name__, name)

            marking = Marking.INJECT if injectable else Marking.RESOLVE
            sites.append(
                InjectionSite(
                    kind=SiteKind.FIELD,
                    owner=cls,
                    name=name,
                    target_type=self._hint(annotation),
                    marking=marking,
                    key=(resolve_marker.key or name) if marking is Marking.RESOLVE else None,
                )
            )
        return sites

    def _markers(self, member: Any) -> List[Union[Inject, Resolve]]:
        if get_origin(member) is Annotated:
            markers = []
            for metadata in get_args(member)[1:]:
                # Bare marker classes are accepted as well as instances
                if metadata is Inject or metadata is Resolve:
                    metadata = metadata()
                if isinstance(metadata, (Inject, Resolve)):
                    markers.append(metadata)
            return markers
        if not callable(member):
            return []
        found = (getattr(member, INJECT_ATTRIBUTE, None), getattr(member, RESOLVE_ATTRIBUTE, None))
        return [marker for marker in found if isinstance(marker, (Inject, Resolve))]

    def _declared_fields(self, cls: Type) -> Dict[str, Any]:
        """Annotations declared on ``cls``, each evaluated on its own.

        Names that cannot be found are left as ``ForwardRef``. An annotation
        that cannot be evaluated at all stays a string.
        """
        try:
            annotations = inspect.get_annotations(cls)
        except NameError:
            annotations = inspect.get_annotations(cls, format=_forward_ref_format())
        module = sys.modules.get(cls.__module__)
        globalns = vars(module) if module is not None else {}
        localns = self._class_namespace(cls)
        return {name: self._evaluate(annotation, globalns, localns) for name, annotation in annotations.items()}

    def _signature(self, func: Callable[..., Any], owner: Optional[Type] = None) -> inspect.Signature:
        try:
            signature = inspect.signature(func)
        except NameError:
            signature = inspect.signature(func, annotation_format=_forward_ref_format())
        globalns = getattr(func, "__globals__", {})
        localns = self._class_namespace(owner) if owner is not None else {}
        parameters = [
            parameter.replace(annotation=self._evaluate(parameter.annotation, globalns, localns))
            for parameter in signature.parameters.values()
        ]
        return signature.replace(
            parameters=parameters,
            return_annotation=self._evaluate(signature.return_annotation, globalns, localns),
        )

    @staticmethod
    def _class_namespace(cls: Type) -> Dict[str, Any]:
        namespace = dict(vars(cls))
        namespace.setdefault(cls.__name__, cls)
        return namespace

    def _evaluate(self, annotation: Any, globalns: Mapping[str, Any], localns: Mapping[str, Any]) -> Any:
        if isinstance(annotation, ForwardRef):
            annotation = annotation.__forward_arg__
        if isinstance(annotation, str):
            try:
                return eval(annotation, dict(globalns), _HintNamespace(localns, globalns))
            except (NameError, TypeError, AttributeError, SyntaxError):
                return annotation
        if get_origin(annotation) is Annotated:
            base, *metadata = get_args(annotation)
            if isinstance(base, (str, ForwardRef)):
                evaluated = self._evaluate(base, globalns, localns)
                if not isinstance(evaluated, str):
                    return Annotated[(evaluated, *metadata)]
        return annotation

    @staticmethod
    def _arguments(signature: inspect.Signature) -> List[inspect.Parameter]:
        """Parameters of a function pulled from a class body, without ``self``."""
        parameters = list(signature.parameters.values())
        if parameters and parameters[0].name == "self":
            return parameters[1:]
        return parameters

    @staticmethod
    def _hint(annotation: Any) -> Optional[Any]:
        if annotation is _EMPTY:
            return None
        if get_origin(annotation) is Annotated:
            return get_args(annotation)[0]
        return annotation

    def _accepts(self, field_annotation: Any, parameter_annotation: Any) -> bool:
        field_type = self._hint(field_annotation)
        parameter_type = self._hint(parameter_annotation)
        if field_type is None or parameter_type is None or field_type is Any:
            return True
        if inspect.isclass(field_type) and inspect.isclass(parameter_type):
            return issubclass(parameter_type, field_type)
        return field_type == parameter_type

    def _type_label(self, annotation: Any) -> str:
        hint = self._hint(annotation)
        if hint is None:
            return "None" if annotation is None else "Any"
        if hint is type(None):
            return "None"
        if inspect.isclass(hint):
            return hint.__name__
        return str(hint)
