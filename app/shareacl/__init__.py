"""shareacl - maintenance tooling for Windows file servers."""

__version__ = "0.3.0"
