"""Markup tree adapters."""
