"""
CLI Module

Click command group for running and validating suite plans.
"""

from .main import cli, main

__all__ = ["cli", "main"]
