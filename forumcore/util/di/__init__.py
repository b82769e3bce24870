"""Dependency injection wiring.

``PROVIDERS`` lists one entry per component. A component whose provider
class has subclasses is swappable: the production subclass sets
``__is_mock__ = False`` and the test subclass ``__is_mock__ = True``.
Concrete providers (config, domain, application) have no subclasses and
are used as they are.
"""

from collections.abc import Iterable

from forumcore.util.di.application import ProdApplicationProvider
from forumcore.util.di.base import Component, ProviderBase
from forumcore.util.di.core import ProdConfigProvider
from forumcore.util.di.domain import ProdDomainProvider
from forumcore.util.di.infrastructure import (
    PersistenceProvider,
    ProdPersistenceProvider,
)
from forumcore.util.error import DependencyInjectionError

PROVIDERS: list[type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    PersistenceProvider,
]


def swappable_components() -> set[Component]:
    """Names of the components that have a test double."""
    return {
        base.__mock_component__
        for base in PROVIDERS
        if base.__subclasses__() and base.__mock_component__
    }


def get_provider(base: type[ProviderBase], use_mock: bool = False) -> type[ProviderBase]:
    """Pick the implementation of ``base`` to instantiate.

    Raises:
        DependencyInjectionError: ``base`` is swappable but has no subclass
            of the requested kind (the test double is only registered once
            ``tests.di`` is imported).
    """
    implementations = base.__subclasses__()
    if not implementations:
        return base

    for impl in implementations:
        if impl.__is_mock__ == use_mock:
            return impl

    kind = "mock" if use_mock else "production"
    name = base.__mock_component__ or base.__name__
    raise DependencyInjectionError(f"No {kind} implementation for {name}")


def build_providers(mocked: Iterable[Component] = ()) -> list[ProviderBase]:
    """Instantiate every provider, using test doubles for ``mocked``."""
    mocked = set(mocked)
    unknown = mocked - swappable_components()
    if unknown:
        raise DependencyInjectionError(f"Unknown components: {sorted(unknown)}")
    return [
        get_provider(base, use_mock=base.__mock_component__ in mocked)()
        for base in PROVIDERS
    ]


__all__ = [
    "Component",
    "PROVIDERS",
    "PersistenceProvider",
    "ProdApplicationProvider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdPersistenceProvider",
    "ProviderBase",
    "build_providers",
    "get_provider",
    "swappable_components",
]
