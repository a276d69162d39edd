"""
Shared utilities: configuration, naming, logging, errors and manifests.
"""
