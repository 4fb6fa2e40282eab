"""Unit tests for the FastAPI integration helpers."""

import pytest

pytest.importorskip("fastapi")

from unittest.mock import MagicMock

from fastapi import FastAPI

from needle_di.domain import UnresolvablePropertyError, resolve, service
from needle_di.infrastructure.fastapi_integration.integration import (
    CONFIGURATION_STATE_ATTRIBUTE,
    create_fastapi_dependency,
    create_request_dependency,
    install_configuration,
)


@service
class NameService:
    prenom: str

    @resolve
    def set_prenom(self, prenom: str) -> None:
        self.prenom = prenom


def make_request(app):
    """Build a minimal request double exposing ``app``."""
    request = MagicMock()
    request.app = app
    return request


class TestCreateFastAPIDependency:
    """Test cases for create_fastapi_dependency."""

    def test_returns_callable(self):
        """Test that a callable is returned."""
        assert callable(create_fastapi_dependency(NameService, {"prenom": "Fabien"}))

    def test_dependency_builds_service(self):
        """Test that calling the dependency builds the service."""
        dependency = create_fastapi_dependency(NameService, {"prenom": "Fabien"})
        assert dependency().prenom == "Fabien"

    def test_dependency_builds_fresh_instances(self):
        """Test that each call builds a new graph."""
        dependency = create_fastapi_dependency(NameService, {"prenom": "Fabien"})
        assert dependency() is not dependency()

    def test_dependency_propagates_injection_errors(self):
        """Test that build failures surface when the dependency is called."""
        dependency = create_fastapi_dependency(NameService)

        with pytest.raises(UnresolvablePropertyError):
            dependency()

    def test_configuration_is_captured_at_creation(self):
        """Test that later changes to the source mapping are not seen."""
        configuration = {"prenom": "Fabien"}
        dependency = create_fastapi_dependency(NameService, configuration)
        configuration["prenom"] = "Other"

        assert dependency().prenom == "Fabien"


class TestInstallConfiguration:
    """Test cases for install_configuration."""

    def test_configuration_is_stored_on_state(self):
        """Test that the configuration is stored on the application state."""
        app = FastAPI()
        install_configuration(app, {"prenom": "Fabien"})

        assert getattr(app.state, CONFIGURATION_STATE_ATTRIBUTE) == {"prenom": "Fabien"}


class TestCreateRequestDependency:
    """Test cases for create_request_dependency."""

    def test_builds_with_installed_configuration(self):
        """Test that the application configuration is used."""
        app = FastAPI()
        install_configuration(app, {"prenom": "Fabien"})
        dependency = create_request_dependency(NameService)

        assert dependency(make_request(app)).prenom == "Fabien"

    def test_fails_without_installed_configuration(self):
        """Test that a missing configuration is reported."""
        app = FastAPI()
        dependency = create_request_dependency(NameService)

        with pytest.raises(RuntimeError, match="install_configuration"):
            dependency(make_request(app))
