"""CLI front-end module for gcpeasy

Typer application exposing the env, cluster, pod and rails command groups
together with the top-level shortcuts.
"""

from .main import app

__all__ = ['app']
