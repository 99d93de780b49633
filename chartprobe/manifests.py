"""Typed views of rendered workload manifests.

Only the parts of the Kubernetes Deployment / Job schema the chart tests
inspect are modelled; unknown fields are ignored on decode. Field names are
snake_case in Python and camelCase in the manifest.
"""

from __future__ import annotations

import msgspec


class ObjectMeta(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Resource metadata.

    Attributes
    ----------
    name : str, optional
        Resource name.
    namespace : str, optional
        Namespace the resource is rendered into.
    labels : dict[str, str]
        Labels; empty when the manifest has none.
    annotations : dict[str, str]
        Annotations, including Helm hook annotations.

    """

    name: str | None = None
    namespace: str | None = None
    labels: dict[str, str] = msgspec.field(default_factory=dict)
    annotations: dict[str, str] = msgspec.field(default_factory=dict)


class EnvVar(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Literal environment variable on a container."""

    name: str
    value: str | None = None


class LocalObjectReference(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Reference to an object in the same namespace, such as a pull secret."""

    name: str


class SecretEnvSource(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Secret whose keys are injected as environment variables."""

    name: str
    optional: bool | None = None


class ConfigMapEnvSource(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """ConfigMap whose keys are injected as environment variables."""

    name: str
    optional: bool | None = None


class EnvFromSource(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """One ``envFrom`` entry; exactly one reference is normally set."""

    prefix: str | None = None
    secret_ref: SecretEnvSource | None = None
    config_map_ref: ConfigMapEnvSource | None = None


class Container(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Container spec within a pod template."""

    name: str
    image: str | None = None
    image_pull_policy: str | None = None
    command: list[str] = msgspec.field(default_factory=list)
    args: list[str] = msgspec.field(default_factory=list)
    env: list[EnvVar] = msgspec.field(default_factory=list)
    env_from: list[EnvFromSource] = msgspec.field(default_factory=list)


class PodSpec(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Pod spec.

    ``image_pull_secrets`` stays ``None`` when the manifest omits the field so
    an absent list can be told apart from an empty one.
    """

    containers: list[Container] = msgspec.field(default_factory=list)
    image_pull_secrets: list[LocalObjectReference] | None = None
    restart_policy: str | None = None
    service_account_name: str | None = None


class PodTemplateSpec(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Pod template: its own metadata plus the pod spec."""

    metadata: ObjectMeta = msgspec.field(default_factory=ObjectMeta)
    spec: PodSpec = msgspec.field(default_factory=PodSpec)


class WorkloadSpec(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Spec shared by Deployments and Jobs."""

    template: PodTemplateSpec = msgspec.field(default_factory=PodTemplateSpec)
    replicas: int | None = None
    backoff_limit: int | None = None


class Workload(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """A Deployment or Job shaped resource."""

    api_version: str | None = None
    kind: str | None = None
    metadata: ObjectMeta = msgspec.field(default_factory=ObjectMeta)
    spec: WorkloadSpec = msgspec.field(default_factory=WorkloadSpec)

    @property
    def containers(self) -> list[Container]:
        """Return the pod template's containers."""
        return self.spec.template.spec.containers


class WorkloadList(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Every workload decoded from one render."""

    items: list[Workload] = msgspec.field(default_factory=list)


__all__ = [
    "ConfigMapEnvSource",
    "Container",
    "EnvFromSource",
    "EnvVar",
    "LocalObjectReference",
    "ObjectMeta",
    "PodSpec",
    "PodTemplateSpec",
    "SecretEnvSource",
    "Workload",
    "WorkloadList",
    "WorkloadSpec",
]
