"""Invoke ``helm template`` and ``helm lint`` against a local chart.

This module keeps every subprocess call to helm in one place. Callers pass a
:class:`RenderOptions` describing the chart and its values, and receive the
rendered YAML text; a failed render raises :class:`RenderError` carrying the
command and helm's stderr.

Examples
--------
Render the migration hook with an override:

    options = RenderOptions(
        chart_path=Path("charts/auto-deploy-app"),
        set_values={"application.migrateCommand": "echo migrate"},
        namespace=namespace_for("minimal-ruby-app"),
    )
    output = render_template(options, "migrate", ["templates/db-migrate-hook.yaml"])

"""

from __future__ import annotations

import dataclasses as dc
import shutil
import subprocess
import typing as typ
from pathlib import Path

from chartprobe.errors import ExecutableNotFoundError, RenderError
from chartprobe.logging import get_logger, log_debug, log_error, log_info
from chartprobe.values import to_set_args

if typ.TYPE_CHECKING:
    from collections.abc import Sequence

    from chartprobe.config import ProbeConfig

logger = get_logger(__name__)


@dc.dataclass(frozen=True, slots=True)
class RenderOptions:
    """Inputs for a single helm invocation.

    Attributes:
        chart_path: Chart directory to render.
        set_values: Flat ``--set`` values, applied after ``values_files``.
        values_files: YAML values files passed with ``--values`` in order.
        namespace: Release namespace; omitted from the command when None.
        helm_binary: helm executable name or path.
        timeout: Seconds before the helm process is abandoned.

    """

    chart_path: Path
    set_values: dict[str, str] = dc.field(default_factory=dict)
    values_files: tuple[Path, ...] = ()
    namespace: str | None = None
    helm_binary: str = "helm"
    timeout: int = 60

    @classmethod
    def from_config(
        cls, config: ProbeConfig, **overrides: typ.Any
    ) -> RenderOptions:
        """Build options from runtime configuration plus explicit overrides."""
        fields: dict[str, typ.Any] = {
            "chart_path": config.chart_path,
            "helm_binary": config.helm_binary,
            "timeout": config.render_timeout,
        }
        fields.update(overrides)
        return cls(**fields)


def require_exe(name: str) -> None:
    """Verify a CLI tool is available in PATH.

    Raises
    ------
    ExecutableNotFoundError
        If the executable is not found in PATH.

    """
    if shutil.which(name) is None:
        msg = f"Required executable '{name}' not found in PATH"
        raise ExecutableNotFoundError(msg)


def build_template_command(
    options: RenderOptions,
    release_name: str,
    templates: Sequence[str] = (),
    extra_args: Sequence[str] | None = None,
) -> list[str]:
    """Assemble the ``helm template`` argv for ``options``.

    Values files precede ``--set`` flags so explicit values win, matching
    Helm's precedence.
    """
    cmd = [options.helm_binary, "template", release_name, str(options.chart_path)]
    if options.namespace:
        cmd.extend(["--namespace", options.namespace])
    for values_file in options.values_files:
        cmd.extend(["--values", str(values_file)])
    cmd.extend(to_set_args(options.set_values))
    for template in templates:
        cmd.extend(["--show-only", template])
    cmd.extend(extra_args or ())
    return cmd


def _decode_output(output: bytes | str | None) -> str:
    """Return captured output as text; TimeoutExpired keeps raw bytes."""
    if isinstance(output, bytes):
        return output.decode(errors="replace")
    return output or ""


def render_template(
    options: RenderOptions,
    release_name: str,
    templates: Sequence[str] = (),
    extra_args: Sequence[str] | None = None,
) -> str:
    """Render chart templates and return the YAML text.

    Args:
        options: Chart location, values and helm settings.
        release_name: Release name passed to helm.
        templates: Template paths relative to the chart (``--show-only``);
            all templates render when empty.
        extra_args: Additional helm arguments appended verbatim.

    Returns:
        The rendered manifests as produced by helm.

    Raises:
        ExecutableNotFoundError: If the helm binary is not on PATH.
        RenderError: If helm exits non-zero or exceeds the timeout.

    """
    require_exe(options.helm_binary)
    cmd = build_template_command(options, release_name, templates, extra_args)
    log_info(
        logger,
        "Rendering release %s from %s (%d value(s), templates=%s)",
        release_name,
        options.chart_path,
        len(options.set_values),
        ",".join(templates) or "all",
    )

    try:
        result = subprocess.run(  # noqa: S603 - argv built from validated options
            cmd,
            capture_output=True,
            text=True,
            check=False,
            timeout=options.timeout,
        )
    except subprocess.TimeoutExpired as exc:
        log_error(logger, "helm template timed out after %ss", options.timeout)
        raise RenderError(cmd, None, _decode_output(exc.stderr)) from exc

    if result.returncode != 0:
        log_error(
            logger,
            "helm template failed with exit code %d: %s",
            result.returncode,
            result.stderr.strip(),
        )
        raise RenderError(cmd, result.returncode, result.stderr)

    log_debug(logger, "Rendered %d byte(s) for %s", len(result.stdout), release_name)
    return result.stdout


def lint_chart(options: RenderOptions) -> subprocess.CompletedProcess[str]:
    """Run ``helm lint`` on the chart; the caller inspects the exit code."""
    require_exe(options.helm_binary)
    cmd = [options.helm_binary, "lint", str(options.chart_path)]
    for values_file in options.values_files:
        cmd.extend(["--values", str(values_file)])
    cmd.extend(to_set_args(options.set_values))
    log_info(logger, "Linting chart %s", options.chart_path)
    return subprocess.run(  # noqa: S603 - argv built from validated options
        cmd,
        capture_output=True,
        text=True,
        check=False,
        timeout=options.timeout,
    )


__all__ = [
    "RenderOptions",
    "build_template_command",
    "lint_chart",
    "render_template",
    "require_exe",
]
