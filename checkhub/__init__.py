"""checkhub - load and validate datasets through a registry of checkers."""

__version__ = "0.1.0"
