# src/api/facade.py — v1
"""Public API facade — single entry point for report generation.

Usage:
    from neuroreport.api.facade import run_workflow
    result = await run_workflow("Jane Doe")
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from neuroreport.api.models import ProtectedArtifact, RunOptions, WorkflowResult
from neuroreport.config.settings import Settings
from neuroreport.core.errors import RenderFailure
from neuroreport.data.availability import DataAvailabilityChecker
from neuroreport.data.file_store import FileTabularStore
from neuroreport.logging.context import clear_context, set_run_context
from neuroreport.pipeline.orchestrator import GenerationOrchestrator
from neuroreport.pipeline.processor_factory import create_processor
from neuroreport.pipeline.raters import RaterExpander
from neuroreport.pipeline.registry import DomainRegistry
from neuroreport.render.coordinator import RenderCoordinator
from neuroreport.render.manifest_builder import ManifestBuilder, parse_manifest
from neuroreport.render.render_factory import (
    create_enrichment_service,
    create_render_engine,
)
from neuroreport.storage.change_detection import create_change_detector
from neuroreport.storage.layout import WorkspaceLayout
from neuroreport.storage.lock import RunLock
from neuroreport.storage.markers import EditProtectionTracker
from neuroreport.tracking.status_tracker import generate_run_id

if TYPE_CHECKING:
    from neuroreport.data.base_store import BaseTabularStore
    from neuroreport.pipeline.plugin_kit.base_processor import BaseDomainProcessor
    from neuroreport.render.base_render_engine import BaseRenderEngine
    from neuroreport.render.coordinator import SleepFn
    from neuroreport.render.enrichment import BaseEnrichmentService

logger = logging.getLogger(__name__)


async def run_workflow(
    subject: str,
    options: RunOptions | None = None,
    settings: Settings | None = None,
    registry: DomainRegistry | None = None,
    processor: BaseDomainProcessor | None = None,
    store: BaseTabularStore | None = None,
    render_engine: BaseRenderEngine | None = None,
    enrichment: BaseEnrichmentService | None = None,
    sleep: SleepFn | None = None,
) -> WorkflowResult:
    """Generate domain artifacts, write the manifest and render the report.

    The whole invocation holds the workspace run lock. Per-domain problems
    end up in the returned RunReport; setup errors and a failed final
    render pass propagate.

    Args:
        subject: Subject label (report title, output file name).
        options: Per-run switches (defaults from settings).
        settings: Global settings. Loaded from .env if None.
        registry: Domain registry. Default table if None.
        processor: Domain processor. Loaded from PROCESSOR_CLASS if None.
        store: Tabular data store. File store on DATA_DIR if None.
        render_engine: Render engine. From RENDER_ENGINE if None.
        enrichment: Enrichment service. From ENRICHMENT_COMMAND if None.
        sleep: Awaitable sleep used between render passes (tests).

    Raises:
        ConcurrentRunDetected: If another run holds the workspace lock.
        ProcessorLoadError: If the processor cannot be loaded.
        RenderFailure: If the final render pass fails, or a render-only
            run finds no manifest.
    """
    settings = settings or Settings()
    options = options or RunOptions()
    force = _pick(options.force_regenerate, settings.force_regenerate)
    protect = _pick(options.protect_edits, settings.protect_edits)
    two_stage = _pick(options.two_stage, settings.two_stage_render)

    layout = WorkspaceLayout.from_settings(settings)
    if registry is None:
        registry = DomainRegistry.from_table()
    run_id = generate_run_id()
    set_run_context(subject, run_id)
    logger.info("Starting run %s for %s", run_id, subject)

    try:
        with RunLock(layout.lock_path, subject=subject, reclaim_stale=settings.lock_reclaim_stale):
            report = None
            builder = ManifestBuilder(registry, layout)

            if options.generate:
                orchestrator = build_orchestrator(
                    settings, layout, registry, processor=processor, store=store
                )
                report = await orchestrator.run(
                    subject, force_regenerate=force, protect_edits=protect, run_id=run_id
                )
                entries = builder.write(report)
            elif layout.manifest_path.is_file():
                entries = parse_manifest(layout.manifest_path.read_text(encoding="utf-8"))
            else:
                raise RenderFailure(
                    1, f"{layout.manifest_path.name} not found; run generation first"
                )

            output_path = None
            if options.render:
                coordinator = RenderCoordinator(
                    engine=render_engine or create_render_engine(settings),
                    output_dir=settings.output_path,
                    output_format=settings.report_format,
                    enrichment=enrichment or create_enrichment_service(settings),
                    wait_seconds=settings.enrichment_wait_seconds,
                    output_name_template=settings.output_name_template,
                    sleep=sleep or asyncio.sleep,
                )
                outcome = await coordinator.run(
                    layout.manifest_path, subject, two_stage=two_stage
                )
                output_path = outcome.output_path
    finally:
        clear_context()

    return WorkflowResult(
        subject=subject,
        run_id=run_id,
        report=report,
        manifest_path=layout.manifest_path,
        manifest_entries=entries,
        output_path=output_path,
    )


def build_orchestrator(
    settings: Settings,
    layout: WorkspaceLayout,
    registry: DomainRegistry,
    processor: BaseDomainProcessor | None = None,
    store: BaseTabularStore | None = None,
) -> GenerationOrchestrator:
    """Wire a GenerationOrchestrator from settings."""
    store = store or FileTabularStore(
        settings.data_path,
        data_format=settings.data_format,
        domain_column=settings.domain_column,
    )
    return GenerationOrchestrator(
        registry=registry,
        availability=DataAvailabilityChecker(
            store,
            domain_column=settings.domain_column,
            score_columns=settings.score_columns_list,
        ),
        expander=RaterExpander(
            pediatric_instruments=settings.pediatric_instruments_list,
            rater_column=settings.rater_column,
            test_column=settings.test_column,
            age_group_column=settings.age_group_column,
        ),
        markers=create_tracker(settings),
        processor=processor or create_processor(settings),
        layout=layout,
    )


def create_tracker(settings: Settings) -> EditProtectionTracker:
    return EditProtectionTracker(
        marker_suffix=settings.marker_suffix,
        detector=create_change_detector(settings.edit_detection),
    )


def list_protected_artifacts(
    settings: Settings | None = None,
    registry: DomainRegistry | None = None,
) -> list[ProtectedArtifact]:
    """Artifacts a regular run would not overwrite, in section order."""
    settings = settings or Settings()
    if registry is None:
        registry = DomainRegistry.from_table()
    layout = WorkspaceLayout.from_settings(settings)
    tracker = create_tracker(settings)

    protected: list[ProtectedArtifact] = []
    for spec in registry.list_specs():
        for path in layout.existing_artifacts(spec):
            if not tracker.is_protected(path):
                continue
            record = tracker.record(path)
            protected.append(
                ProtectedArtifact(
                    domain_key=spec.key,
                    path=layout.relative(path),
                    generated_at=record.generated_at,
                    content_mtime=record.content_mtime,
                )
            )
    return protected


def _pick(value: bool | None, default: bool) -> bool:
    return default if value is None else value
