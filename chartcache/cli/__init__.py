"""Command line interface entry points for chartcache."""

from .main import app, create_app, run

__all__ = ["app", "create_app", "run"]
