#!/usr/bin/env python3
"""
kcm.py - Kubeconfig manager command line

Lists, switches, deletes, backs up and imports kubeconfig contexts.
Run 'kcm.py --help' for the available commands.
"""

import sys

from kcm_lib.cli import main

if __name__ == "__main__":
    sys.exit(main())
