"""
Code signing helper for Windows build pipelines.

This package installs a code-signing certificate into the machine store,
discovers signable files and signs them with signtool.exe, retrying
transient failures.
"""

__version__ = "0.1.0"
