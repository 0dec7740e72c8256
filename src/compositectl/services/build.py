"""CompositeBuildService: validate and build a composite package.

Pipeline, each stage traced as a child span under ``-v``::

    plan -> count -> resolve -> service check -> catalog -> binds -> sets
         -> (build only) render -> write

Any composite error aborts the whole run; nothing is written unless
every validation passed.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from compositectl.config.logging import bind_build_context
from compositectl.domain.errors import CompositeError, InsufficientServiceCountError
from compositectl.domain.plan import CompositePlan
from compositectl.infrastructure.filesystem import read_plan, write_metadata_files
from compositectl.services._helpers import now_compact
from compositectl.services.base import BaseService
from compositectl.services.binds import BindReport, BindValidator
from compositectl.services.context import BuildContext
from compositectl.services.contracts import BuildResultData, ValidateResultData, dump_validated
from compositectl.services.render import CompositeMetadata, render_metadata
from compositectl.services.resolve import ServiceResolver, assert_services
from compositectl.services.result import ServiceResult
from compositectl.services.sets import SetValidator
from compositectl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


def assert_more_than_one_service(plan: CompositePlan) -> None:
    """A composite declaring fewer than two services is rejected.

    The declared list is counted as written; a repeated reference still
    counts twice and resolves once.
    """
    count = len(plan.services)
    if count < 2:
        raise InsufficientServiceCountError(count)


class CompositeBuildService(BaseService):
    """Resolve, validate, and render one composite plan."""

    @traced
    def validate(self, plan: CompositePlan | Path) -> ServiceResult:
        """Run every validation stage without writing anything."""
        op = "validate_composite"
        warnings: list[str] = []
        try:
            plan = self._load(plan)
            ident, target = self._identity(plan)
            context, report = self._validate(plan, ident, warnings)
        except CompositeError as exc:
            return self._failure(op, exc, warnings)

        warnings[:0] = report.warnings
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(ValidateResultData, self._summary(context, report, ident, target)),
            warnings=warnings,
        )

    @traced
    def build(self, plan: CompositePlan | Path, output_dir: Path | None = None) -> ServiceResult:
        """Validate *plan*, then render its metadata files into *output_dir*."""
        op = "build_composite"
        warnings: list[str] = []
        try:
            plan = self._load(plan)
            ident, target = self._identity(plan)
            context, report = self._validate(plan, ident, warnings)
        except CompositeError as exc:
            return self._failure(op, exc, warnings)
        warnings[:0] = report.warnings

        with trace_span("render", binds=report.checked) as span:
            metadata = CompositeMetadata.from_context(context, ident=ident, target=target)
            files = render_metadata(metadata)
            if span:
                span.annotate("files", len(files))

        out = output_dir if output_dir is not None else self._workspace.output_dir()
        with trace_span("write", files=len(files)):
            written = write_metadata_files(out, files)
        logger.info("Wrote %d metadata files to %s", len(written), out)

        with trace_span("dispatch_event", hook="post_build"):
            self._dispatch_event(
                "post_build",
                {"ident": ident, "output_dir": str(out), "files": sorted(files)},
                warnings,
            )

        data = self._summary(context, report, ident, target)
        data.update(output_dir=str(out), files=sorted(files))
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(BuildResultData, data),
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    @staticmethod
    def _load(plan: CompositePlan | Path) -> CompositePlan:
        if isinstance(plan, CompositePlan):
            return plan
        with trace_span("load_plan"):
            return read_plan(plan)

    def _identity(self, plan: CompositePlan) -> tuple[str, str]:
        pkg = plan.package
        ident = f"{pkg.origin}/{pkg.name}/{pkg.version}/{pkg.release or now_compact()}"
        return ident, pkg.target or self._workspace.settings.build.target

    def _validate(
        self,
        plan: CompositePlan,
        ident: str,
        warnings: list[str],
    ) -> tuple[BuildContext, BindReport]:
        bind_build_context(composite=ident)
        assert_more_than_one_service(plan)

        with trace_span("resolve", services=len(plan.services)) as span:
            resolved = ServiceResolver(self._workspace.store).resolve(plan.services)
            if span:
                span.annotate("resolved", len(resolved))
        self._dispatch_event(
            "post_resolve",
            {"resolved": {ref: str(pkg.ident) for ref, pkg in resolved.items()}},
            warnings,
        )

        with trace_span("assert_services"):
            assert_services(resolved)

        with trace_span("catalog"):
            context = BuildContext.create(plan, resolved)

        with trace_span("binds", services=len(plan.bind_map)) as span:
            report = BindValidator(context).validate()
            if span:
                span.annotate("checked", report.checked)

        with trace_span("sets", sets=len(plan.service_sets)):
            SetValidator(plan).validate()

        self._dispatch_event(
            "post_validate",
            {"ident": ident, "warnings": [*report.warnings, *warnings]},
            warnings,
        )
        return context, report

    @staticmethod
    def _summary(
        context: BuildContext,
        report: BindReport,
        ident: str,
        target: str,
    ) -> dict[str, Any]:
        return {
            "ident": ident,
            "target": target,
            "services": sorted(context.plan.services),
            "resolved": {ref: str(pkg.ident) for ref, pkg in sorted(context.resolved.items())},
            "bind_count": report.checked,
            "unmapped": [
                {"service": u.service, "bind_name": u.bind_name} for u in report.unmapped
            ],
            "cycles": [list(c) for c in report.cycles],
        }
