"""Markdown editing behaviour: document model, smart editing, highlighting, focus regions and outline."""

__version__ = "2.0.1"