#!/usr/bin/env python3
"""
kcm_repl.py - Interactive shell for kubeconfig management

Starts the kcm REPL against the kubeconfig selected by --kubeconfig,
$KUBECONFIG or ~/.kube/config.
"""

import sys

from kcm_lib.cli import repl_main

if __name__ == "__main__":
    sys.exit(repl_main())
