"""Test containers: every swappable component mocked unless asked otherwise."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider

from forumcore.util.di import Component, build_providers, swappable_components
from forumcore.util.error import DependencyInjectionError


def build_test_container(
    unmock: set[Component] | None = None, with_fastapi: bool = False
) -> AsyncContainer:
    """Build a container for tests.

    Args:
        unmock: Components that should use their production implementation,
            e.g. ``{"persistence"}`` for tests against a real Postgres.
        with_fastapi: Also register the FastAPI request provider, needed
            when the container is handed to ``create_app``.

    Raises:
        DependencyInjectionError: ``unmock`` names an unknown component.
    """
    unmock = set(unmock or ())
    unknown = unmock - swappable_components()
    if unknown:
        raise DependencyInjectionError(f"Unknown components: {sorted(unknown)}")

    providers = build_providers(mocked=swappable_components() - unmock)
    if with_fastapi:
        providers.append(FastapiProvider())
    return make_async_container(*providers)
