"""Command-line entry point for rendering and inspecting chart values.

Usage:
    chartprobe render --set application.migrateCommand="echo migrate" \\
        --show-only templates/db-migrate-hook.yaml
    chartprobe values --set image.secrets[0].name=expected-secret

Environment variables:
    CHARTPROBE_HELM_BIN        - helm executable (default: helm)
    CHARTPROBE_CHART_PATH      - chart directory (default: charts/auto-deploy-app)
    CHARTPROBE_RENDER_TIMEOUT  - seconds per render (default: 60)
    CHARTPROBE_LOG_LEVEL       - femtologging level (default: INFO)
"""

from __future__ import annotations

import sys
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter

from chartprobe.cases import (
    env_names,
    first_container,
    image_pull_secret_names,
    namespace_for,
)
from chartprobe.config import ProbeConfig
from chartprobe.decoder import decode_workloads
from chartprobe.errors import ChartProbeError, ValuesError
from chartprobe.logging import (
    configure_logging,
    get_logger,
    log_exception,
    log_warning,
)
from chartprobe.renderer import RenderOptions, render_template
from chartprobe.values import format_values_yaml, parse_set_values

if typ.TYPE_CHECKING:
    from collections.abc import Sequence

    from chartprobe.manifests import Workload

logger = get_logger(__name__)

app = App(
    name="chartprobe",
    help="Render the auto-deploy-app chart and inspect the result",
    version="0.1.0",
)


def parse_assignments(items: Sequence[str] | None) -> dict[str, str]:
    """Turn ``key=value`` strings into a flat values mapping.

    Only the first ``=`` separates key from value; later assignments to the
    same key win.

    Raises
    ------
    ValuesError
        If an item has no ``=`` or an empty key.

    """
    values: dict[str, str] = {}
    for item in items or ():
        key, sep, value = item.partition("=")
        if not sep or not key:
            msg = f"expected key=value, got {item!r}"
            raise ValuesError(msg)
        values[key] = value
    return values


def describe_workload(workload: Workload) -> str:
    """Summarise a decoded workload on one line."""
    container = first_container(workload)
    pull_secrets = image_pull_secret_names(workload)
    return (
        f"{workload.kind} {workload.metadata.name}: "
        f"containers={len(workload.containers)} "
        f"env={','.join(env_names(container)) or '-'} "
        f"envFrom={len(container.env_from)} "
        f"imagePullSecrets={','.join(pull_secrets) if pull_secrets else '-'}"
    )


@app.command
def render(
    *,
    chart: typ.Annotated[Path | None, Parameter(help="Chart directory")] = None,
    release: str = "chartprobe",
    namespace: str | None = None,
    set_values: typ.Annotated[list[str] | None, Parameter(name="--set")] = None,
    show_only: list[str] | None = None,
) -> int:
    """Render the chart and print one summary line per workload.

    Args:
        chart: Chart directory; defaults to CHARTPROBE_CHART_PATH.
        release: Release name passed to helm.
        namespace: Release namespace; a unique one is generated when omitted.
        set_values: ``key=value`` chart values, repeatable.
        show_only: Template paths to render, repeatable.

    Returns:
        Exit code (0 for success, 1 for configuration, render or decode
        failures).

    """
    try:
        config = ProbeConfig.from_env()
    except ValueError as exc:
        print(f"chartprobe: {exc}", file=sys.stderr)
        return 1

    normalized_level, invalid_level = configure_logging(config.log_level)
    if invalid_level:
        log_warning(
            logger,
            "Invalid CHARTPROBE_LOG_LEVEL %r, falling back to %s",
            config.log_level,
            normalized_level,
        )

    try:
        overrides: dict[str, typ.Any] = {
            "set_values": parse_assignments(set_values),
            "namespace": namespace or namespace_for(),
        }
        if chart is not None:
            overrides["chart_path"] = chart
        options = RenderOptions.from_config(config, **overrides)
        output = render_template(options, release, show_only or ())
        workloads = decode_workloads(output)
        lines = [describe_workload(workload) for workload in workloads.items]
    except ChartProbeError as exc:
        log_exception(logger, f"Rendering release {release} failed", exc)
        print(f"chartprobe: {exc}", file=sys.stderr)
        return 1

    for line in lines:
        print(line)
    return 0


@app.command
def values(
    *,
    set_values: typ.Annotated[list[str] | None, Parameter(name="--set")] = None,
) -> int:
    """Print the nested values YAML that ``--set`` assignments produce.

    Args:
        set_values: ``key=value`` chart values, repeatable.

    Returns:
        Exit code (0 for success, 1 for malformed keys).

    """
    try:
        tree = parse_set_values(parse_assignments(set_values))
    except ValuesError as exc:
        print(f"chartprobe: {exc}", file=sys.stderr)
        return 1

    print(format_values_yaml(tree), end="")
    return 0


def main() -> int:
    """Entry point for the CLI."""
    return app()


if __name__ == "__main__":
    sys.exit(main())
