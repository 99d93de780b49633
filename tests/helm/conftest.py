"""Pytest fixtures for Helm chart testing."""

from __future__ import annotations

import shutil
import typing as typ
from pathlib import Path

import pytest

from chartprobe.cases import namespace_for
from chartprobe.config import ProbeConfig
from chartprobe.errors import RenderError
from chartprobe.renderer import RenderOptions, render_template

if typ.TYPE_CHECKING:
    from collections.abc import Sequence


def _find_repo_root(start: Path) -> Path:
    """Locate the repository root by finding pyproject.toml."""
    for parent in (start, *start.parents):
        if (parent / "pyproject.toml").exists():
            return parent
    msg = f"Failed to locate repository root from: {start}"
    raise FileNotFoundError(msg)


@pytest.fixture(scope="session")
def repo_root() -> Path:
    """Return the repository root path."""
    return _find_repo_root(Path(__file__).resolve())


@pytest.fixture(scope="session")
def probe_config() -> ProbeConfig:
    """Return configuration read from CHARTPROBE_* variables."""
    return ProbeConfig.from_env()


@pytest.fixture(scope="session")
def chart_path(repo_root: Path, probe_config: ProbeConfig) -> Path:
    """Return the path to the auto-deploy-app chart."""
    if probe_config.chart_path.is_absolute():
        return probe_config.chart_path
    return repo_root / probe_config.chart_path


@pytest.fixture(scope="session")
def fixtures_path(repo_root: Path) -> Path:
    """Return the path to test fixtures."""
    return repo_root / "tests" / "helm" / "fixtures"


@pytest.fixture(scope="session")
def require_helm(probe_config: ProbeConfig) -> None:
    """Skip tests if helm is not installed."""
    if shutil.which(probe_config.helm_binary) is None:
        pytest.skip("helm is not installed")


class ChartRenderer(typ.Protocol):
    """Callable that renders the chart and returns helm's YAML output."""

    def __call__(
        self,
        release_name: str,
        values: dict[str, str],
        templates: Sequence[str],
        *,
        values_files: Sequence[Path] = (),
    ) -> str: ...


@pytest.fixture
def render_chart(
    chart_path: Path, probe_config: ProbeConfig, require_helm: None
) -> ChartRenderer:
    """Return a renderer bound to the chart; render errors fail the test."""

    def _render(
        release_name: str,
        values: dict[str, str],
        templates: Sequence[str],
        *,
        values_files: Sequence[Path] = (),
    ) -> str:
        options = RenderOptions.from_config(
            probe_config,
            chart_path=chart_path,
            set_values=values,
            values_files=tuple(values_files),
            namespace=namespace_for(),
        )
        try:
            return render_template(options, release_name, templates)
        except RenderError as exc:
            pytest.fail(f"helm template failed: {exc.stderr}")

    return _render
