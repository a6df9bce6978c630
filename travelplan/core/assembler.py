"""Turns a validated request and its budget summary into plan sections."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from travelplan.core.budget import render_budget_report
from travelplan.core.errors import ProviderError
from travelplan.core.prompts import build_combined_prompt, build_section_prompts
from travelplan.core.sanitizer import sanitize
from travelplan.core.schemas import AssembledPlan, BudgetSummary, GeneratedSections, PlanRequest
from travelplan.core.types import GenerationMode, SectionName
from travelplan.services.gemini.parsing import parse_combined_response

logger = logging.getLogger(__name__)


def _sanitize_sections(sections: GeneratedSections) -> GeneratedSections:
    return GeneratedSections(**{name: sanitize(value) for name, value in sections.model_dump().items()})


def _empty_section_warnings(sections: GeneratedSections) -> List[str]:
    return [f"Section '{name}' could not be generated and is empty." for name in sections.empty_sections()]


class PlanAssembler:
    """Generates the five narrative sections and the budget report.

    ``generator`` is anything exposing ``async generate(prompt) -> str``.
    In ``combined`` mode one structured call produces every section; in
    ``sections`` mode five sequential calls are made and a provider failure only
    empties the affected section.
    """

    def __init__(self, generator: Any, *, mode: GenerationMode = "combined") -> None:
        if mode not in ("combined", "sections"):
            raise ValueError(f"Unsupported generation mode '{mode}'")
        self.generator = generator
        self.mode = mode

    async def assemble(self, request: PlanRequest, summary: BudgetSummary) -> AssembledPlan:
        if self.mode == "combined":
            sections, warnings = await self._generate_combined(request, summary)
        else:
            sections, warnings = await self._generate_sections(request, summary)

        sections = _sanitize_sections(sections)
        for warning in _empty_section_warnings(sections):
            if warning not in warnings:
                warnings.append(warning)

        return AssembledPlan(
            sections=sections,
            budget_report=render_budget_report(request, summary),
            warnings=warnings,
        )

    async def _generate_combined(
        self, request: PlanRequest, summary: BudgetSummary
    ) -> tuple[GeneratedSections, List[str]]:
        raw = await self.generator.generate(build_combined_prompt(request, summary))
        sections, parsed = parse_combined_response(raw)
        warnings: List[str] = []
        if not parsed:
            logger.warning(
                "Combined plan for %s was not valid JSON; returning raw text as overview",
                request.destination_city,
            )
            warnings.append("The plan could not be split into sections; the full text is shown as the overview.")
        return sections, warnings

    async def _generate_sections(
        self, request: PlanRequest, summary: BudgetSummary
    ) -> tuple[GeneratedSections, List[str]]:
        texts: Dict[SectionName, str] = {}
        warnings: List[str] = []
        first_error: Optional[ProviderError] = None

        for name, prompt in build_section_prompts(request, summary).items():
            try:
                texts[name] = await self.generator.generate(prompt)
            except ProviderError as exc:
                logger.error(
                    "Section '%s' generation failed for %s (%s): %s",
                    name,
                    request.destination_city,
                    exc.kind,
                    exc,
                )
                first_error = first_error or exc
                texts[name] = ""
                warnings.append(f"Section '{name}' could not be generated and is empty.")

        if first_error is not None and not any(text.strip() for text in texts.values()):
            raise first_error

        return GeneratedSections(**texts), warnings
