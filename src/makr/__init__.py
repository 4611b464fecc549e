"""makr: organise GitHub templates, collections and local projects."""

__version__ = "0.1.0"
