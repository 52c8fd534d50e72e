"""
Release CLI commands package.
"""

from .list import ListCommand, ShowCommand
from .run import RunCommand

__all__ = ["RunCommand", "ListCommand", "ShowCommand"]
