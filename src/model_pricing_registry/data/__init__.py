"""Bundled data package for the model pricing registry.

Holds the pricing file shipped with the package, used when no user or
environment supplied pricing file is found. Not intended for direct import.
"""
