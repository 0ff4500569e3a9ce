"""Managers: the producers and consumers of the application event graph."""
