"""
kcm_lib.common - Shared utilities for kcm tools

This module provides:
- colors: ANSI color codes and logging functions
- kubectl: kubectl execution and the apply collaborator
- prompts: Interactive prompt utilities
"""

from .colors import Colors, log, warn, error, info, log_messages
from .kubectl import kubectl_exec, KubectlApplier

__all__ = [
    'Colors', 'log', 'warn', 'error', 'info', 'log_messages',
    'kubectl_exec', 'KubectlApplier',
]
