#gridpoint/domain/common/di_container.py

"""
Service container used by the application wiring.

Interfaces map to a ready instance or to a factory. The surface service and
the click session must be shared by everything that resolves them, so their
factories are registered as singletons.
"""
from typing import Dict, Any, Type, TypeVar, Callable, Set, Tuple


T = TypeVar('T')


class DIContainer:
    """Maps interface types to instances or factories."""

    def __init__(self):
        self._instances: Dict[type, Any] = {}
        self._factories: Dict[type, Tuple[Callable[[], Any], bool]] = {}
        self._resolving: Set[type] = set()

    def register_instance(self, base_type: Type[T], instance: T) -> None:
        self._instances[base_type] = instance

    def register_factory(self, base_type: Type[T], factory: Callable[[], T],
                         singleton: bool = False) -> None:
        """
        Args:
            base_type: Interface the factory provides
            factory: Zero-argument callable building the implementation
            singleton: Keep the first instance and return it on every resolve
        """
        self._factories[base_type] = (factory, singleton)

    def resolve(self, base_type: Type[T]) -> T:
        """
        Instance for ``base_type``.

        Raises:
            ValueError: Unknown type, or a factory that (indirectly) resolves itself
        """
        if base_type in self._instances:
            return self._instances[base_type]
        if base_type not in self._factories:
            raise ValueError(f"No registration found for {base_type.__name__}")
        if base_type in self._resolving:
            raise ValueError(f"Circular dependency detected while resolving {base_type.__name__}")

        factory, singleton = self._factories[base_type]
        self._resolving.add(base_type)
        try:
            instance = factory()
        finally:
            self._resolving.discard(base_type)

        if singleton:
            self._instances[base_type] = instance
        return instance
