"""Runtime configuration for chart rendering.

Usage
-----
Create a configuration with defaults:

>>> config = ProbeConfig()
>>> config.helm_binary
'helm'

Or load from environment variables:

>>> import os
>>> os.environ["CHARTPROBE_RENDER_TIMEOUT"] = "120"
>>> ProbeConfig.from_env().render_timeout
120

"""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path

from chartprobe.logging import DEFAULT_LOG_LEVEL

DEFAULT_CHART_PATH = Path("charts/auto-deploy-app")


@dc.dataclass(frozen=True, slots=True)
class ProbeConfig:
    """Configuration shared by the renderer, the CLI and the chart tests.

    Attributes
    ----------
    helm_binary
        Name or path of the helm executable.
    chart_path
        Chart directory rendered when no explicit path is given. Relative
        paths are resolved against the working directory.
    render_timeout
        Seconds to wait for a single ``helm template`` call.
    log_level
        Raw femtologging level; normalized when logging is configured.

    """

    helm_binary: str = "helm"
    chart_path: Path = DEFAULT_CHART_PATH
    render_timeout: int = 60
    log_level: str = DEFAULT_LOG_LEVEL

    @staticmethod
    def _parse_positive_int(env_var: str, default: int) -> int:
        """Read a positive integer env var, falling back to a default."""
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            msg = f"{env_var} must be an integer, got: {raw!r}"
            raise ValueError(msg) from exc
        if value < 1:
            msg = f"{env_var} must be positive, got: {value}"
            raise ValueError(msg)
        return value

    @staticmethod
    def _read_str(env_var: str, default: str) -> str:
        raw = os.environ.get(env_var, "").strip()
        return raw or default

    @classmethod
    def from_env(cls) -> ProbeConfig:
        """Create configuration from environment variables.

        Reads the following environment variables:

        - ``CHARTPROBE_HELM_BIN``: helm executable name or path.
        - ``CHARTPROBE_CHART_PATH``: chart directory to render.
        - ``CHARTPROBE_RENDER_TIMEOUT``: seconds per render. Must be a
          positive integer.
        - ``CHARTPROBE_LOG_LEVEL``: femtologging level name.

        Returns
        -------
        ProbeConfig
            Configuration instance with values from environment or defaults.

        Raises
        ------
        ValueError
            If CHARTPROBE_RENDER_TIMEOUT is not a positive integer.

        """
        return cls(
            helm_binary=cls._read_str("CHARTPROBE_HELM_BIN", "helm"),
            chart_path=Path(
                cls._read_str("CHARTPROBE_CHART_PATH", str(DEFAULT_CHART_PATH))
            ),
            render_timeout=cls._parse_positive_int("CHARTPROBE_RENDER_TIMEOUT", 60),
            log_level=cls._read_str("CHARTPROBE_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        )
