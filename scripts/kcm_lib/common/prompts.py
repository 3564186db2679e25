"""
Interactive prompt utilities for kcm.

Thin wrappers around prompt_toolkit used by the CLI and the REPL
to ask for confirmation and to collect pasted kubeconfig text.
"""

from typing import Optional

from prompt_toolkit import prompt


def prompt_yes_no(question: str, default: bool = False) -> Optional[bool]:
    """
    Prompt for yes/no confirmation.

    Args:
        question: Question to ask
        default: Default answer (True=yes, False=no)

    Returns:
        True for yes, False for no, None if cancelled
    """
    suffix = " [Y/n]" if default else " [y/N]"
    try:
        answer = prompt(f"{question}{suffix}: ").strip().lower()
    except (KeyboardInterrupt, EOFError):
        return None

    if not answer:
        return default
    return answer in ('y', 'yes')


def prompt_multiline(label: str) -> Optional[str]:
    """
    Collect a multi-line block of text (e.g. a pasted kubeconfig).

    Input ends with Esc+Enter (or Meta+Enter).

    Returns:
        The entered text, or None if cancelled (Ctrl+C/Ctrl+D)
    """
    print(f"{label} (finish with Esc+Enter, cancel with Ctrl+C):")
    try:
        text = prompt("", multiline=True)
    except (KeyboardInterrupt, EOFError):
        return None
    return text if text.strip() else None
