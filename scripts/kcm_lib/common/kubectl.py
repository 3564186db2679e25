"""
kubectl command execution utilities.

Provides the apply collaborator used by the mutation engine: every change
that must reach the live kubeconfig goes through ``kubectl config``.
"""

import os
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from kcm_lib.config.constants import DEFAULT_KUBECTL, DEFAULT_TIMEOUT
from kcm_lib.errors import ApplyFailed


def kubectl_exec(
    args: Sequence[str],
    kubectl: str = DEFAULT_KUBECTL,
    timeout: int = DEFAULT_TIMEOUT,
    env: Optional[dict] = None,
) -> tuple[bool, str]:
    """
    Execute a kubectl command and capture output.

    Args:
        args: Arguments after the binary (e.g., ["config", "use-context", "dev"])
        kubectl: kubectl binary name or path
        timeout: Seconds to wait before giving up
        env: Extra environment variables for the child process

    Returns:
        Tuple of (success: bool, output: str)
        On failure, output contains the error message.
    """
    child_env = None
    if env:
        child_env = dict(os.environ)
        child_env.update(env)

    try:
        result = subprocess.run(
            [kubectl, *args],
            capture_output=True,
            text=True,
            timeout=timeout,
            env=child_env,
        )
    except subprocess.TimeoutExpired:
        return False, f"Command timed out after {timeout}s"
    except OSError as e:
        return False, str(e)

    if result.returncode != 0:
        return False, result.stderr.strip() or result.stdout.strip() or f"exit status {result.returncode}"
    return True, result.stdout


class KubectlApplier:
    """Applies kubeconfig changes through ``kubectl config``."""

    def __init__(self, kubeconfig: Path, kubectl: str = DEFAULT_KUBECTL, timeout: int = DEFAULT_TIMEOUT):
        self.kubeconfig = Path(kubeconfig)
        self.kubectl = kubectl
        self.timeout = timeout

    def _run(self, *args: str, env: Optional[dict] = None) -> str:
        success, output = kubectl_exec(args, kubectl=self.kubectl, timeout=self.timeout, env=env)
        if not success:
            raise ApplyFailed(f"kubectl {' '.join(args[:3])} failed: {output}")
        return output

    def _config(self, verb: str, name: str) -> None:
        self._run("config", verb, name, "--kubeconfig", str(self.kubeconfig))

    def use_context(self, name: str) -> None:
        self._config("use-context", name)

    def delete_context(self, name: str) -> None:
        self._config("delete-context", name)

    def delete_cluster(self, name: str) -> None:
        self._config("delete-cluster", name)

    def delete_user(self, name: str) -> None:
        self._config("delete-user", name)

    def merge_flatten(self, paths: Sequence[Path]) -> str:
        """
        Merge kubeconfig files the way kubectl does for a KUBECONFIG list.

        Args:
            paths: Files in precedence order

        Returns:
            The flattened, merged document as text
        """
        if not paths:
            raise ApplyFailed("Nothing to merge")
        merged_from = os.pathsep.join(str(p) for p in paths)
        return self._run("config", "view", "--flatten", env={"KUBECONFIG": merged_from})
