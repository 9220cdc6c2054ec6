"""Core infrastructure: errors, paths, configuration and theming."""
