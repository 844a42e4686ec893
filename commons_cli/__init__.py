"""
Commons Rewards CLI

Command-line interface for the off-chain reward batch engine.

Usage:
    python -m commons_cli batch --events-file events.json --out payload.json
    python -m commons_cli verify payload.json [--address ADDR]
    python -m commons_cli config --init
"""

__version__ = "0.1.0"
