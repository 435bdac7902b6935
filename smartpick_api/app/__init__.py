"""
Application package initializer.

This package contains the main entrypoint for the API and its
submodules: ``core`` (configuration, logging, store and identity
plumbing), ``schemas`` (request and response models), ``services``
(business logic over the record store) and ``api`` (HTTP routes).
"""

from .main import app  # noqa: F401
