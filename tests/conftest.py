# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides a temporary report workspace with scored test data, settings
pointing at it, and a deterministic in-memory domain processor.
No external dependencies: rendering is disabled or faked.
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from neuroreport.config.settings import Settings
from neuroreport.data.availability import DataAvailabilityChecker
from neuroreport.data.file_store import FileTabularStore
from neuroreport.pipeline.orchestrator import GenerationOrchestrator
from neuroreport.pipeline.plugin_kit.base_processor import BaseDomainProcessor
from neuroreport.pipeline.raters import RaterExpander
from neuroreport.pipeline.registry import DomainRegistry
from neuroreport.render.base_render_engine import BaseRenderEngine, RenderResult
from neuroreport.storage.base_output_writer import BaseOutputWriter
from neuroreport.storage.layout import WorkspaceLayout
from neuroreport.storage.markers import EditProtectionTracker


# === FAKES: processor and render engine ===


class FakeProcessor(BaseDomainProcessor):
    """Deterministic processor: content depends only on its inputs."""

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.calls: list[tuple[str, str, int]] = []
        self._fail_on = fail_on or set()

    @property
    def name(self) -> str:
        return "fake"

    async def process(self, domain_key: str, rows: pd.DataFrame, rater_tag: str) -> str:
        self.calls.append((domain_key, rater_tag, len(rows)))
        if domain_key in self._fail_on:
            raise RuntimeError(f"boom in {domain_key}")
        return f"## {domain_key} ({rater_tag})\n\n{len(rows)} rows\n"


class RecordingEngine(BaseRenderEngine):
    """Render engine that snapshots the manifest and writes a fake PDF."""

    def __init__(self, workdir: Path, fail_passes: set[int] | None = None) -> None:
        self.workdir = workdir
        self.fail_passes = fail_passes or set()
        self.manifests: list[str] = []

    @property
    def name(self) -> str:
        return "recording"

    async def render(self, manifest_path: Path, output_format: str) -> RenderResult:
        self.manifests.append(manifest_path.read_text())
        if len(self.manifests) in self.fail_passes:
            return RenderResult(success=False, message="typst error")
        produced = self.workdir / "template.pdf"
        produced.write_text(f"pass {len(self.manifests)}")
        return RenderResult(success=True, output_path=produced)


# === FIXTURES: Sample data ===


@pytest.fixture
def neurocog_frame() -> pd.DataFrame:
    """Cognitive scores: iq and memory usable, motor without any score."""
    return pd.DataFrame(
        {
            "domain": [
                "General Cognitive Ability",
                "General Cognitive Ability",
                "Memory",
                "Motor",
            ],
            "test": ["wais5", "wais5", "wms4", "pegboard"],
            "test_name": ["WAIS-5", "WAIS-5", "WMS-IV", "Grooved Pegboard"],
            "scale": ["Full Scale IQ", "Verbal Comprehension", "Immediate Memory", "Dominant Hand"],
            "score": [102, 98, 91, None],
            "percentile": [55, 45, 27, None],
        }
    )


@pytest.fixture
def adult_neurobehav_frame() -> pd.DataFrame:
    """Adult behavioural ratings: ADHD self + observer, emotion via two aliases."""
    return pd.DataFrame(
        {
            "domain": [
                "ADHD",
                "ADHD",
                "Behavioral/Emotional/Social",
                "Personality Disorders",
            ],
            "test": ["caars2_self", "caars2_observer", "pai", "pai"],
            "test_name": ["CAARS-2 Self", "CAARS-2 Observer", "PAI", "PAI"],
            "scale": ["Inattention", "Inattention", "Depression", "Borderline Features"],
            "rater": [" Self", "observer", "self", "self"],
            "score": [65, 60, 70, 62],
            "percentile": [93, 84, 98, 88],
        }
    )


@pytest.fixture
def child_neurobehav_frame() -> pd.DataFrame:
    """Child ADHD ratings from three respondents plus an ineligible observer."""
    return pd.DataFrame(
        {
            "domain": ["ADHD"] * 4,
            "test": ["conners4_self", "conners4_parent", "conners4_teacher", "caars2_observer"],
            "scale": ["Inattention"] * 4,
            "rater": ["self", "parent", "teacher", "observer"],
            "score": [60, 68, 72, 55],
            "percentile": [84, 96, 99, 70],
        }
    )


def write_source(data_dir: Path, source: str, frame: pd.DataFrame) -> Path:
    """Write a data source as CSV into the workspace data directory."""
    data_dir.mkdir(parents=True, exist_ok=True)
    path = data_dir / f"{source}.csv"
    frame.to_csv(path, index=False)
    return path


# === FIXTURES: Workspace ===


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Empty report workspace with a data/ directory."""
    root = tmp_path / "workspace"
    (root / "data").mkdir(parents=True)
    return root


@pytest.fixture
def adult_workspace(
    workspace: Path,
    neurocog_frame: pd.DataFrame,
    adult_neurobehav_frame: pd.DataFrame,
) -> Path:
    """Workspace holding neurocog and adult neurobehav data (no validity source)."""
    write_source(workspace / "data", "neurocog", neurocog_frame)
    write_source(workspace / "data", "neurobehav", adult_neurobehav_frame)
    return workspace


@pytest.fixture
def settings(workspace: Path) -> Settings:
    """Settings bound to the temporary workspace, rendering disabled."""
    return Settings(
        _env_file=None,
        workspace_dir=workspace,
        render_engine="none",
        enrichment_wait_seconds=0,
    )


@pytest.fixture
def registry() -> DomainRegistry:
    return DomainRegistry.from_table()


@pytest.fixture
def layout(workspace: Path) -> WorkspaceLayout:
    return WorkspaceLayout(root=workspace)


@pytest.fixture
def markers() -> EditProtectionTracker:
    return EditProtectionTracker()


@pytest.fixture
def fake_processor() -> FakeProcessor:
    return FakeProcessor()


@pytest.fixture
def make_orchestrator(registry, layout, markers, workspace):
    """Factory building an orchestrator over the workspace data directory."""

    def _make(
        processor: BaseDomainProcessor | None = None,
        writer: BaseOutputWriter | None = None,
    ) -> GenerationOrchestrator:
        store = FileTabularStore(workspace / "data")
        return GenerationOrchestrator(
            registry=registry,
            availability=DataAvailabilityChecker(store),
            expander=RaterExpander(
                pediatric_instruments=["conners4", "basc3_prs", "wisc5"]
            ),
            markers=markers,
            processor=processor or FakeProcessor(),
            layout=layout,
            writer=writer,
        )

    return _make


@pytest.fixture
def write_data(workspace: Path):
    """Write a named data source into the workspace: write_data("neurocog", df)."""

    def _write(source: str, frame: pd.DataFrame) -> Path:
        return write_source(workspace / "data", source, frame)

    return _write


@pytest.fixture
def processor_cls() -> type[FakeProcessor]:
    """The FakeProcessor class, for tests that need custom failure sets."""
    return FakeProcessor


@pytest.fixture
def recording_engine(workspace: Path) -> RecordingEngine:
    return RecordingEngine(workspace)


@pytest.fixture
def no_sleep():
    """Awaitable sleep replacement that records requested delays."""
    delays: list[float] = []

    async def _sleep(seconds: float) -> None:
        delays.append(seconds)

    _sleep.delays = delays  # type: ignore[attr-defined]
    return _sleep
