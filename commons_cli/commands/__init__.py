"""
CLI command modules.
"""

from commons_cli.commands import batch, verify

__all__ = ["batch", "verify"]
