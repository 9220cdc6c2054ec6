"""Utility modules for shareacl."""
