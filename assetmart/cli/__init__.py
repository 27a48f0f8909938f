"""Assetmart CLI — Typer-based command-line interface.

Provides the ``assetmart`` command with subcommands for running a demo
trade, quoting prices and showing the effective configuration.

All output uses Rich for formatted terminal display.
"""
