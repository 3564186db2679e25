"""Shared fixtures: a sample kubeconfig on disk and a fake kubectl applier."""

from pathlib import Path

import pytest

from kcm_lib.config import ConfigStore, KubeConfig, parse, serialize
from kcm_lib.engine import MutationEngine
from kcm_lib.errors import ApplyFailed


SAMPLE_KUBECONFIG = """\
apiVersion: v1
kind: Config
preferences: {}
current-context: a
clusters:
- name: shared
  cluster:
    server: https://shared.example.com:6443
- name: solo
  cluster:
    server: https://solo.example.com:6443
users:
- name: alice
  user:
    token: alice-token
- name: bob
  user:
    token: bob-token
contexts:
- name: a
  context:
    cluster: shared
    user: alice
- name: b
  context:
    cluster: shared
    user: bob
    namespace: team-b
- name: c
  context:
    cluster: solo
    user: alice
"""

IMPORT_KUBECONFIG = """\
apiVersion: v1
kind: Config
current-context: dev
clusters:
- name: k1
  cluster:
    server: https://k1.example.com
users:
- name: u1
  user:
    token: u1-token
contexts:
- name: dev
  context:
    cluster: k1
    user: u1
"""


class FakeApplier:
    """Records kubectl calls; fails on request; merges with first-wins semantics."""

    def __init__(self):
        self.calls = []
        self.fail_on = set()  # verbs ("delete-cluster") or (verb, name) pairs
        self.merge_output = None
        self.merge_inputs = []

    def _call(self, verb: str, name: str) -> None:
        self.calls.append((verb, name))
        if verb in self.fail_on or (verb, name) in self.fail_on:
            raise ApplyFailed(f"kubectl config {verb} {name} failed: boom")

    def use_context(self, name):
        self._call("use-context", name)

    def delete_context(self, name):
        self._call("delete-context", name)

    def delete_cluster(self, name):
        self._call("delete-cluster", name)

    def delete_user(self, name):
        self._call("delete-user", name)

    def merge_flatten(self, paths):
        paths = [Path(p) for p in paths]
        self.calls.append(("merge", paths))
        self.merge_inputs = [p.read_text() for p in paths]
        if "merge" in self.fail_on:
            raise ApplyFailed("kubectl config view failed: boom")
        if self.merge_output is not None:
            return self.merge_output

        merged = KubeConfig()
        for text in self.merge_inputs:
            doc = parse(text)
            for attr in ("contexts", "clusters", "users"):
                have = {item.name for item in getattr(merged, attr)}
                getattr(merged, attr).extend(
                    item for item in getattr(doc, attr) if item.name not in have)
            if not merged.current_context:
                merged.current_context = doc.current_context
            for key, value in doc.extra.items():
                merged.extra.setdefault(key, value)
        return serialize(merged)


@pytest.fixture
def kubeconfig(tmp_path: Path) -> Path:
    path = tmp_path / ".kube" / "config"
    path.parent.mkdir()
    path.write_text(SAMPLE_KUBECONFIG)
    path.chmod(0o600)
    return path


@pytest.fixture
def scratch_dir(tmp_path: Path) -> Path:
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def store(kubeconfig: Path, scratch_dir: Path) -> ConfigStore:
    return ConfigStore(kubeconfig, temp_dir=scratch_dir)


@pytest.fixture
def applier() -> FakeApplier:
    return FakeApplier()


@pytest.fixture
def engine(store: ConfigStore, applier: FakeApplier) -> MutationEngine:
    return MutationEngine(store, applier)
