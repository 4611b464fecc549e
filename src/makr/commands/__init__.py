"""Typer command groups for the makr CLI."""
