"""Ingestflow CLI — Typer-based command line interface."""
