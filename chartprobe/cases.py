"""Render cases and accessors used by the chart assertions."""

from __future__ import annotations

import dataclasses as dc
import secrets
import string
import typing as typ

from chartprobe.errors import ManifestDecodeError
from chartprobe.values import merge_values

if typ.TYPE_CHECKING:
    from chartprobe.manifests import Container, Workload

DB_MIGRATE_HOOK_TEMPLATE = "templates/db-migrate-hook.yaml"
NAMESPACE_PREFIX = "minimal-ruby-app"

DEFAULT_GITLAB_VALUES: typ.Final[dict[str, str]] = {
    "gitlab.app": "auto-devops-examples/minimal-ruby-app",
    "gitlab.env": "prod",
}

_BASE62 = string.digits + string.ascii_uppercase + string.ascii_lowercase


@dc.dataclass(frozen=True, slots=True)
class RenderCase:
    """One render-and-assert case.

    Attributes:
        name: Case identifier, used as the pytest id.
        values: Per-case ``--set`` overrides.
        expected: Fragment the decoded output must equal or contain.
        template: Chart template to render.
        release_name: Optional release name overriding the suite default.

    """

    name: str
    values: dict[str, str]
    expected: object = None
    template: str = DB_MIGRATE_HOOK_TEMPLATE
    release_name: str | None = None

    def merged_values(self, base: dict[str, str] | None = None) -> dict[str, str]:
        """Return ``base`` overlaid with this case's values."""
        return merge_values(base or {}, self.values)


def unique_id(length: int = 6) -> str:
    """Return a random base-62 identifier."""
    return "".join(secrets.choice(_BASE62) for _ in range(length))


def namespace_for(prefix: str = NAMESPACE_PREFIX) -> str:
    """Return a namespace name unique to one case."""
    return f"{prefix}-{unique_id().lower()}"


def first_container(workload: Workload) -> Container:
    """Return the first container of the workload's pod template.

    Raises
    ------
    ManifestDecodeError
        If the pod template has no containers.

    """
    containers = workload.containers
    if not containers:
        kind = workload.kind or "workload"
        msg = f"{kind} {workload.metadata.name!r} has no containers"
        raise ManifestDecodeError(msg)
    return containers[0]


def env_names(container: Container) -> list[str]:
    return [env.name for env in container.env]


def image_pull_secret_names(workload: Workload) -> list[str] | None:
    """Return pull secret names, or ``None`` when the field is absent."""
    pull_secrets = workload.spec.template.spec.image_pull_secrets
    if pull_secrets is None:
        return None
    return [ref.name for ref in pull_secrets]


__all__ = [
    "DB_MIGRATE_HOOK_TEMPLATE",
    "DEFAULT_GITLAB_VALUES",
    "NAMESPACE_PREFIX",
    "RenderCase",
    "env_names",
    "first_container",
    "image_pull_secret_names",
    "namespace_for",
    "unique_id",
]
