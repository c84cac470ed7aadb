"""Controller Resolvers - Locate controller classes by name.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

"Class@method" route targets name a controller class; a resolver turns
that name into the class. The router never reflects into a global
namespace on its own, so tests can inject a registry of fakes.
"""

from __future__ import annotations

import importlib
import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from roadrouter_core.errors import TargetResolutionError

logger = logging.getLogger(__name__)


class ControllerResolver(ABC):
    """Abstract controller resolver."""

    @abstractmethod
    def resolve(self, name: str) -> type:
        """Return the class registered under ``name``.

        Raises:
            TargetResolutionError: if no class can be located.
        """
        pass


class ControllerRegistry(ControllerResolver):
    """Explicit name to class registry.

    Usage:
        controllers = ControllerRegistry()
        controllers.register(UserController)
        controllers.register(LegacyUsers, name="Users")
    """

    def __init__(self, controllers: Optional[Iterable[type]] = None):
        self._controllers: Dict[str, type] = {}
        for controller in controllers or []:
            self.register(controller)

    def register(self, controller: type, name: Optional[str] = None) -> "ControllerRegistry":
        """Register a controller class."""
        self._controllers[name or controller.__name__] = controller
        return self

    def resolve(self, name: str) -> type:
        """Look up a controller class."""
        try:
            return self._controllers[name]
        except KeyError:
            raise TargetResolutionError(f'Controller "{name}" is not registered') from None

    def names(self) -> List[str]:
        """Get registered controller names."""
        return list(self._controllers)

    def __contains__(self, name: str) -> bool:
        return name in self._controllers


class ImportResolver(ControllerResolver):
    """Resolve dotted names ("package.module.Class") by importing them."""

    def __init__(self, base_package: str = ""):
        self.base_package = base_package

    def resolve(self, name: str) -> type:
        """Import module and fetch class."""
        qualified = f"{self.base_package}.{name}" if self.base_package else name
        module_name, _, class_name = qualified.rpartition(".")
        if not module_name:
            raise TargetResolutionError(f'Controller "{name}" is not a dotted path')

        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise TargetResolutionError(f'Failed to import "{module_name}": {e}') from e

        controller = getattr(module, class_name, None)
        if not isinstance(controller, type):
            raise TargetResolutionError(f'"{qualified}" is not a class')

        logger.debug(f"Imported controller {qualified}")
        return controller


__all__ = [
    "ControllerResolver",
    "ControllerRegistry",
    "ImportResolver",
]
