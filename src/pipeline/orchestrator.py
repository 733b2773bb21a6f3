# src/pipeline/orchestrator.py — v1
"""Generation orchestrator — per-domain state machine.

For every registered domain, in section order:

    pending → skipped     no data source, no rows, or no populated score
    pending → protected   an existing artifact was edited by hand
    pending → processing → generated | cached | failed

Domains are processed sequentially. A failure in one domain is recorded and
the run moves on; a domain's files are only touched after all of its rater
variants were processed successfully.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from neuroreport.core.errors import (
    NoUsableData,
    ProcessorFailure,
    ProtectedEditConflict,
)
from neuroreport.core.models import DomainOutcome, GenerationStatus
from neuroreport.logging.context import set_domain_context
from neuroreport.storage.local_writer import LocalWriter
from neuroreport.tracking.status_tracker import StatusTracker

if TYPE_CHECKING:
    from neuroreport.core.models import DomainSpec, RaterVariant, RunReport
    from neuroreport.data.availability import DataAvailabilityChecker
    from neuroreport.pipeline.plugin_kit.base_processor import BaseDomainProcessor
    from neuroreport.pipeline.raters import RaterExpander
    from neuroreport.pipeline.registry import DomainRegistry
    from neuroreport.storage.base_output_writer import BaseOutputWriter
    from neuroreport.storage.layout import WorkspaceLayout
    from neuroreport.storage.markers import EditProtectionTracker

logger = logging.getLogger(__name__)


class GenerationOrchestrator:
    """Drive every domain through generation and record its terminal status.

    Args:
        registry: Domains to process.
        availability: Decides whether a domain has usable data.
        expander: Splits rater-capable domains into respondent variants.
        markers: Edit protection tracker (generation markers).
        processor: Produces artifact text for a domain variant.
        layout: Workspace paths.
        writer: Output writer for artifact files (default: LocalWriter).
    """

    def __init__(
        self,
        registry: DomainRegistry,
        availability: DataAvailabilityChecker,
        expander: RaterExpander,
        markers: EditProtectionTracker,
        processor: BaseDomainProcessor,
        layout: WorkspaceLayout,
        writer: BaseOutputWriter | None = None,
    ) -> None:
        self._registry = registry
        self._availability = availability
        self._expander = expander
        self._markers = markers
        self._processor = processor
        self._layout = layout
        self._writer = writer or LocalWriter()

    async def run(
        self,
        subject: str,
        force_regenerate: bool = False,
        protect_edits: bool = True,
        run_id: str | None = None,
    ) -> RunReport:
        """Process all domains once and return the run report.

        Args:
            subject: Subject label (used for reporting only).
            force_regenerate: Regenerate every domain with data, discarding
                existing artifacts and edit protection.
            protect_edits: Leave domains with hand-edited artifacts alone.
            run_id: Optional run identifier (generated if None).
        """
        tracker = StatusTracker(
            subject,
            run_id=run_id,
            force_regenerate=force_regenerate,
            protect_edits=protect_edits,
        )
        logger.info(
            "Generating %d domains for %s (force=%s, protect_edits=%s)",
            len(self._registry), subject, force_regenerate, protect_edits,
        )

        try:
            for spec in self._registry.list_specs():
                set_domain_context(spec.key)
                outcome = await self._run_domain(spec, force_regenerate, protect_edits)
                tracker.record(outcome)
        finally:
            set_domain_context(None)

        report = tracker.build_report()
        logger.info(
            "Generation complete: %s",
            ", ".join(f"{k}={v}" for k, v in report.counts.items()),
        )
        return report

    # ------------------------------------------------------------------
    # Per-domain state machine
    # ------------------------------------------------------------------

    async def _run_domain(
        self, spec: DomainSpec, force: bool, protect: bool
    ) -> DomainOutcome:
        result = self._availability.check(spec)
        if not result.available or result.rows is None:
            logger.info("Skipped: %s", result.reason)
            return _outcome(spec, "skipped", error=result.reason)

        age_class = self._expander.detect_age_class(result.rows)
        if age_class not in spec.age_classes:
            reason = NoUsableData(spec.key, f"not applicable to {age_class} subjects")
            logger.info("Skipped: %s", reason)
            return _outcome(spec, "skipped", error=reason)

        variants = self._expander.expand(spec, result.rows, age_class)
        if not variants:
            reason = NoUsableData(spec.key, "no eligible respondent has data")
            logger.info("Skipped: %s", reason)
            return _outcome(spec, "skipped", error=reason)

        existing = self._layout.existing_artifacts(spec)
        if protect and not force:
            edited = [p for p in existing if self._markers.is_protected(p)]
            if edited:
                conflict = ProtectedEditConflict(spec.key, edited)
                logger.info("Protected: %s", conflict)
                return _outcome(
                    spec, "protected",
                    artifacts=[self._layout.relative(p) for p in existing],
                    error=conflict,
                )

        try:
            contents = await self._process_variants(spec, variants)
        except ProcessorFailure as exc:
            logger.error("%s", exc, exc_info=exc.__cause__ is not None)
            return _outcome(spec, "failed", error=exc)

        try:
            status = await self._commit(spec, contents, existing, force)
        except OSError as exc:
            logger.exception("Could not write artifacts for %s", spec.key)
            return _outcome(spec, "failed", error=exc)

        paths = [self._layout.artifact_path(spec, tag) for tag in contents]
        logger.info("%s: %s", status.capitalize(), ", ".join(p.name for p in paths))
        return _outcome(
            spec, status,
            artifacts=[self._layout.relative(p) for p in paths],
            rater_tags=list(contents),
        )

    async def _process_variants(
        self, spec: DomainSpec, variants: list[RaterVariant]
    ) -> dict[str, str]:
        """Run the processor for every variant; all must succeed."""
        contents: dict[str, str] = {}
        for variant in variants:
            set_domain_context(spec.key, variant.rater_tag)
            logger.debug("Processing %d rows", variant.row_count)
            try:
                text = await self._processor.process(
                    spec.key, variant.rows, variant.rater_tag
                )
            except Exception as exc:
                detail = str(exc) or type(exc).__name__
                raise ProcessorFailure(spec.key, variant.rater_tag, detail) from exc
            if not isinstance(text, str) or not text.strip():
                raise ProcessorFailure(spec.key, variant.rater_tag, "empty output")
            contents[variant.rater_tag] = text
        set_domain_context(spec.key)
        return contents

    async def _commit(
        self,
        spec: DomainSpec,
        contents: dict[str, str],
        existing: list[Path],
        force: bool,
    ) -> GenerationStatus:
        """Write artifacts and markers, then prune variants no longer produced.

        New content replaces each artifact in place, so a write failure
        leaves the remaining prior artifacts untouched. Returns "generated"
        when forced or when any artifact did not exist before; "cached" when
        every artifact already existed. Unchanged content is not rewritten
        unless forced, so its mtime stays put.
        """
        targets = {tag: self._layout.artifact_path(spec, tag) for tag in contents}
        keep = set(targets.values())
        created = force or not keep.issubset(existing)

        for tag, path in targets.items():
            key = str(path)
            if not force and await self._writer.exists(key):
                previous = await self._writer.read(key)
                if previous == contents[tag].encode("utf-8"):
                    self._markers.mark_generated(path)
                    continue
            await self._writer.write(key, contents[tag])
            self._markers.mark_generated(path)

        for path in existing:
            if path not in keep:
                logger.debug("Removing %s", path.name)
                self._markers.clear(path)

        return "generated" if created else "cached"


def _outcome(
    spec: DomainSpec,
    status: GenerationStatus,
    artifacts: list[str] | None = None,
    rater_tags: list[str] | None = None,
    error: BaseException | None = None,
) -> DomainOutcome:
    return DomainOutcome(
        key=spec.key,
        section_ordinal=spec.section_ordinal,
        status=status,
        artifacts=artifacts or [],
        rater_tags=rater_tags or [],
        message=str(error) if error is not None else None,
        error_type=type(error).__name__ if error is not None else None,
    )
