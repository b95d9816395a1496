"""Decorators for CLI commands."""

from functools import wraps
from typing import Callable, TypeVar

import typer
from rich.console import Console

from ..errors import ConfigError, XapiError

R = TypeVar("R")

err = Console(stderr=True)


def report_errors(func: Callable[..., R]) -> Callable[..., R]:
    """Decorator that turns config and XAPI errors into exit status 1."""
    @wraps(func)
    def wrapper(*args: object, **kwargs: object) -> R:
        try:
            return func(*args, **kwargs)
        except ConfigError as e:
            err.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(1)
        except XapiError as e:
            err.print(f"[bold red]XAPI error:[/bold red] {e}")
            raise typer.Exit(1)
    return wrapper
