"""Unit-test fixtures: a helm subprocess double and sample rendered output."""

from __future__ import annotations

import dataclasses
import subprocess
import typing as typ

import pytest

RENDERED_JOB = """\
---
# Source: auto-deploy-app/templates/db-migrate-hook.yaml
apiVersion: batch/v1
kind: Job
metadata:
  name: migrate-db-migrate
  labels:
    app: migrate
    release: migrate
    firstLabel: expected-label
  annotations:
    "helm.sh/hook": pre-upgrade
    "helm.sh/hook-weight": "0"
spec:
  backoffLimit: 1
  template:
    metadata:
      labels:
        app: migrate
        release: migrate
        firstLabel: expected-label
    spec:
      imagePullSecrets:
        - name: gitlab-registry
      restartPolicy: Never
      containers:
      - name: auto-deploy-app
        image: gitlab.example.com/group/project:stable
        command: ["/bin/sh"]
        args: ["-c", "echo migrate"]
        imagePullPolicy: IfNotPresent
        envFrom:
        - secretRef:
            name: secret-name-test
        env:
        - name: DATABASE_URL
          value: "PRESENT"
        - name: GITLAB_ENVIRONMENT_NAME
          value: ""
        - name: env-name-test
          value: test-value
"""

RENDERED_JOB_WITHOUT_PULL_SECRETS = """\
---
# Source: auto-deploy-app/templates/db-migrate-hook.yaml
apiVersion: batch/v1
kind: Job
metadata:
  name: migrate-db-migrate
spec:
  template:
    spec:
      restartPolicy: Never
      containers:
      - name: auto-deploy-app
        env:
        - name: GITLAB_ENVIRONMENT_NAME
          value: ""
"""


@dataclasses.dataclass(slots=True)
class FakeHelm:
    """Configurable stand-in for the helm binary.

    Attributes:
        calls: argv of every ``subprocess.run`` call, in order.
        kwargs: keyword arguments of every call, in order.
        stdout: Output returned by the next call.
        stderr: Error output returned by the next call.
        returncode: Exit status returned by the next call.
        timeout: When True, calls raise ``subprocess.TimeoutExpired`` with
            ``stderr`` as bytes, as the real timeout does.

    """

    calls: list[tuple[str, ...]] = dataclasses.field(default_factory=list)
    kwargs: list[dict[str, object]] = dataclasses.field(default_factory=list)
    stdout: str = RENDERED_JOB
    stderr: str = ""
    returncode: int = 0
    timeout: bool = False

    def run(
        self, args: list[str], **kwargs: object
    ) -> subprocess.CompletedProcess[str]:
        self.calls.append(tuple(args))
        self.kwargs.append(kwargs)
        if self.timeout:
            raise subprocess.TimeoutExpired(
                args,
                typ.cast("float", kwargs["timeout"]),
                stderr=self.stderr.encode(),
            )
        return subprocess.CompletedProcess(
            args=args,
            returncode=self.returncode,
            stdout=self.stdout,
            stderr=self.stderr,
        )


@pytest.fixture
def fake_helm(monkeypatch: pytest.MonkeyPatch) -> FakeHelm:
    """Pretend helm is installed and capture every invocation."""
    fake = FakeHelm()
    monkeypatch.setattr("shutil.which", lambda name: f"/usr/local/bin/{name}")
    monkeypatch.setattr("subprocess.run", fake.run)
    return fake


@pytest.fixture
def missing_helm(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pretend no executable is on PATH."""
    monkeypatch.setattr("shutil.which", lambda name: None)


@pytest.fixture
def rendered_job() -> str:
    """Return a rendered migration hook with every optional block present."""
    return RENDERED_JOB


@pytest.fixture
def rendered_job_without_pull_secrets() -> str:
    """Return a rendered migration hook whose pod spec omits imagePullSecrets."""
    return RENDERED_JOB_WITHOUT_PULL_SECRETS
