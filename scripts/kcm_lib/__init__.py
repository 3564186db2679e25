"""
kcm_lib - Shared library for the kcm kubeconfig manager

This package contains the kubeconfig document model, the config store,
the mutation engine, and the CLI/REPL front ends built on top of them.
"""

__version__ = "1.0.0"
