"""Configuration constants (see ``settings``)."""
