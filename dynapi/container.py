"""Dependency Injection Container

Purpose: Resolve the instances backing service contracts

Contracts are registered against a factory (a class or any zero-argument
callable) or a ready instance. Singleton registrations are created once,
on first resolution, and reused afterwards.

Usage:
    container = ServiceContainer()
    container.register(IPeopleService, PeopleService)
    add_dynamic_controller(app, IPeopleService, container, authorization)
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from dynapi.models.contract import qualified_name
from dynapi.models.interfaces import IServiceProvider

logger = logging.getLogger(__name__)


@dataclass
class _Registration:
    factory: Optional[Callable[[], Any]]
    singleton: bool
    instance: Any = None


class ServiceContainer(IServiceProvider):
    """Dependency container mapping contract types to implementations"""

    def __init__(self):
        self._registrations: Dict[type, _Registration] = {}
        self._lock = threading.Lock()

    def register(self, contract_type: type, factory: Callable[[], Any], singleton: bool = True) -> "ServiceContainer":
        """Register ``factory`` as the source of ``contract_type`` instances.

        Args:
            contract_type: Contract class
            factory: Implementation class or zero-argument callable
            singleton: Reuse the first created instance for every resolution

        Returns:
            The container, for chaining
        """
        if not callable(factory):
            raise TypeError(f"Factory for {qualified_name(contract_type)} must be callable")
        with self._lock:
            self._registrations[contract_type] = _Registration(factory=factory, singleton=singleton)
        logger.debug(f"Registered {qualified_name(contract_type)} (singleton={singleton})")
        return self

    def register_instance(self, contract_type: type, instance: Any) -> "ServiceContainer":
        """Register an existing instance for ``contract_type``"""
        with self._lock:
            self._registrations[contract_type] = _Registration(factory=None, singleton=True, instance=instance)
        logger.debug(f"Registered instance of {type(instance).__name__} for {qualified_name(contract_type)}")
        return self

    def is_registered(self, contract_type: type) -> bool:
        return contract_type in self._registrations

    def resolve(self, contract_type: type) -> Any:
        """Return an instance implementing ``contract_type``.

        Raises:
            LookupError: No registration exists for ``contract_type``
        """
        registration = self._registrations.get(contract_type)
        if registration is None:
            raise LookupError(f"No service registered for {qualified_name(contract_type)}")

        if not registration.singleton:
            return registration.factory()

        with self._lock:
            if registration.instance is None:
                registration.instance = registration.factory()
                logger.info(f"Created {type(registration.instance).__name__} for {qualified_name(contract_type)}")
            return registration.instance

    def reset(self) -> None:
        """Drop all registrations (used in tests)"""
        with self._lock:
            self._registrations.clear()
