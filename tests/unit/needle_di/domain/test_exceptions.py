"""Unit tests for domain exceptions."""

from typing import ForwardRef

import pytest

from needle_di.domain.exceptions import (
    CyclicDependencyError,
    InjectionError,
    InjectionFailedError,
    InstantiationFailedError,
    NestedInjectionError,
    NotASetterError,
    NotAServiceError,
    UnresolvablePropertyError,
    UnresolvableTypeHintError,
)


class TestInjectionError:
    """Test cases for the base InjectionError class."""

    def test_injection_error_is_exception(self):
        """Test that InjectionError inherits from Exception."""
        assert issubclass(InjectionError, Exception)

    @pytest.mark.parametrize(
        "error_type",
        [
            NotAServiceError,
            CyclicDependencyError,
            InstantiationFailedError,
            NotASetterError,
            UnresolvablePropertyError,
            InjectionFailedError,
            NestedInjectionError,
            UnresolvableTypeHintError,
        ],
    )
    def test_taxonomy_inherits_from_injection_error(self, error_type):
        """Test that every error of the taxonomy is an InjectionError."""
        assert issubclass(error_type, InjectionError)


class TestNotAServiceError:
    """Test cases for the NotAServiceError class."""

    def test_not_a_service_error_message(self):
        """Test that the message names the offending type."""

        class PlainClass:
            pass

        error = NotAServiceError(PlainClass)

        assert error.service_type is PlainClass
        assert "PlainClass" in str(error)
        assert "@service" in str(error)

    def test_not_a_service_error_with_non_class(self):
        """Test that a non-class target is still described."""
        error = NotAServiceError("Missing")
        assert "'Missing'" in str(error)


class TestCyclicDependencyError:
    """Test cases for the CyclicDependencyError class."""

    def test_cyclic_dependency_error_attributes(self):
        """Test that the closing type and the entered types are kept."""

        class ServiceA:
            pass

        class ServiceB:
            pass

        error = CyclicDependencyError(ServiceA, [ServiceA, ServiceB])

        assert error.cycle_type is ServiceA
        assert error.dependencies == [ServiceA, ServiceB]
        assert error.dependency_chain == [ServiceA, ServiceB, ServiceA]
        assert "ServiceA -> ServiceB -> ServiceA" in str(error)

    def test_cyclic_dependency_error_chain_starts_at_first_occurrence(self):
        """Test that the chain only covers the cycle itself."""

        class Root:
            pass

        class ServiceA:
            pass

        class ServiceB:
            pass

        error = CyclicDependencyError(ServiceA, [Root, ServiceA, ServiceB])

        assert error.dependency_chain == [ServiceA, ServiceB, ServiceA]
        assert error.dependencies == [Root, ServiceA, ServiceB]

    def test_cyclic_dependency_error_copies_dependencies(self):
        """Test that later changes to the source list do not leak into the error."""

        class ServiceA:
            pass

        dependencies = [ServiceA]
        error = CyclicDependencyError(ServiceA, dependencies)
        dependencies.clear()

        assert error.dependencies == [ServiceA]


class TestInstantiationFailedError:
    """Test cases for the InstantiationFailedError class."""

    def test_instantiation_failed_error_without_reason(self):
        """Test the message when no reason is given."""

        class Broken:
            pass

        error = InstantiationFailedError(Broken)

        assert error.service_type is Broken
        assert error.reason is None
        assert str(error) == "Unable to instantiate Broken service."

    def test_instantiation_failed_error_with_reason(self):
        """Test that the reason is appended to the message."""

        class Broken:
            pass

        error = InstantiationFailedError(Broken, "boom")
        assert str(error) == "Unable to instantiate Broken service. Reason: boom"


class TestMemberErrors:
    """Test cases for the member-level errors."""

    def test_not_a_setter_error(self):
        """Test that NotASetterError names the method signature."""
        error = NotASetterError("Dummy.set_age(int) : int")

        assert error.description == "Dummy.set_age(int) : int"
        assert str(error) == "The method Dummy.set_age(int) : int must be a setter."

    def test_unresolvable_property_error(self):
        """Test that UnresolvablePropertyError names the member and the key."""
        error = UnresolvablePropertyError("prenom", "prenom")

        assert error.name == "prenom"
        assert error.key == "prenom"
        assert "'prenom'" in str(error)

    def test_injection_failed_error(self):
        """Test that InjectionFailedError names the member."""
        error = InjectionFailedError("first_name")

        assert error.name == "first_name"
        assert str(error) == "Unable to inject a matching instance in member first_name."

    def test_unresolvable_type_hint_error_without_hint(self):
        """Test that UnresolvableTypeHintError names a member with no hint."""
        error = UnresolvableTypeHintError("UserService.set_auth")

        assert error.member == "UserService.set_auth"
        assert error.annotation is None
        assert str(error) == "Cannot determine the type to inject in member UserService.set_auth: it has no type hint."

    def test_unresolvable_type_hint_error_with_forward_ref(self):
        """Test that UnresolvableTypeHintError shows the text of a forward reference."""
        error = UnresolvableTypeHintError("UserService.auth", ForwardRef("AuthService"))

        assert "UserService.auth" in str(error)
        assert "'AuthService' cannot be evaluated" in str(error)


class TestNestedInjectionError:
    """Test cases for the NestedInjectionError class."""

    def test_for_argument(self):
        """Test the constructor argument variant."""
        cause = NotASetterError("x")
        error = NestedInjectionError.for_argument(1, "DataService.__init__(AuthService) : None", cause)

        assert error.cause is cause
        assert error.member == "argument 1 of DataService.__init__(AuthService) : None"
        assert "argument 1 of the constructor DataService.__init__" in str(error)

    def test_for_setter(self):
        """Test the setter variant."""
        cause = UnresolvablePropertyError("prenom", "prenom")
        error = NestedInjectionError.for_setter("NameService.set_prenom(str) : None", cause)

        assert error.member == "NameService.set_prenom(str) : None"
        assert "with the method NameService.set_prenom(str) : None" in str(error)

    def test_for_field(self):
        """Test the field variant."""

        class UserService:
            pass

        error = NestedInjectionError.for_field(UserService, "data_service", InjectionFailedError("x"))

        assert error.member == "UserService.data_service"
        assert "in field UserService.data_service" in str(error)

    def test_root_cause_unwraps_every_level(self):
        """Test that root_cause returns the innermost error."""

        class ServiceA:
            pass

        original = CyclicDependencyError(ServiceA, [ServiceA])
        inner = NestedInjectionError.for_field(ServiceA, "b", original)
        outer = NestedInjectionError.for_setter("ServiceA.set_c(C) : None", inner)

        assert outer.root_cause is original
        assert inner.root_cause is original

    def test_path_lists_members_from_root(self):
        """Test that path lists the members traversed from the outermost level."""

        class ServiceA:
            pass

        class ServiceB:
            pass

        inner = NestedInjectionError.for_field(ServiceB, "c", InjectionFailedError("c"))
        outer = NestedInjectionError.for_field(ServiceA, "b", inner)

        assert outer.path == ["ServiceA.b", "ServiceB.c"]
