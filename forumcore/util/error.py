"""Errors raised while wiring the application."""


class DependencyInjectionError(Exception):
    """Unknown component, or no implementation of the requested kind."""
