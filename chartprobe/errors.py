"""Exception hierarchy for chart rendering and manifest decoding."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from collections.abc import Sequence


class ChartProbeError(Exception):
    """Base class for chartprobe errors."""


class ExecutableNotFoundError(ChartProbeError):
    """Required CLI tool is not installed."""


class RenderError(ChartProbeError):
    """Raised when ``helm template`` fails or times out.

    Parameters
    ----------
    command
        The argv that was executed.
    returncode
        Exit status of the helm process, or ``None`` when it timed out.
    stderr
        Captured standard error output.

    """

    command: tuple[str, ...]
    returncode: int | None
    stderr: str

    def __init__(
        self,
        command: Sequence[str],
        returncode: int | None,
        stderr: str,
    ) -> None:
        """Initialize with the failed command and its diagnostics."""
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr
        if returncode is None:
            msg = f"helm template timed out: {' '.join(self.command)}"
        else:
            msg = f"helm template failed (exit {returncode}): {stderr.strip()}"
        super().__init__(msg)


class ManifestDecodeError(ChartProbeError):
    """Rendered YAML could not be decoded into the requested resource type."""


class ValuesError(ChartProbeError):
    """A chart value key or values file is malformed."""


__all__ = [
    "ChartProbeError",
    "ExecutableNotFoundError",
    "ManifestDecodeError",
    "RenderError",
    "ValuesError",
]
