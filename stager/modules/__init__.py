"""Command line support modules for stager."""
