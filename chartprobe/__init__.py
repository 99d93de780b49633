"""Render the auto-deploy-app Helm chart and decode its workloads.

The primary entrypoints are:

- merge_values / parse_set_values: build chart values for a case
- render_template: run ``helm template`` for a chart
- decode_workload / decode_workloads: turn rendered YAML into typed objects

For lower-level operations, import directly from submodules
(``chartprobe.values``, ``chartprobe.renderer``, ``chartprobe.decoder``,
``chartprobe.manifests``, ``chartprobe.cases``).
"""

from __future__ import annotations

from chartprobe.config import ProbeConfig
from chartprobe.decoder import decode_workload, decode_workloads
from chartprobe.errors import (
    ChartProbeError,
    ExecutableNotFoundError,
    ManifestDecodeError,
    RenderError,
    ValuesError,
)
from chartprobe.renderer import RenderOptions, render_template
from chartprobe.values import merge_values, parse_set_values

__all__ = [
    "ChartProbeError",
    "ExecutableNotFoundError",
    "ManifestDecodeError",
    "ProbeConfig",
    "RenderError",
    "RenderOptions",
    "ValuesError",
    "decode_workload",
    "decode_workloads",
    "merge_values",
    "parse_set_values",
    "render_template",
]
