from __future__ import annotations

import json
from typing import Any

from .validation import AnalysisRequest, Mode

_BASE_INSTRUCTIONS = (
    "You are a physician-guided, evidence-based brain health coach.\n"
    "You MUST:\n"
    "- Anchor your analysis to the user's BTA results provided in bta_payload and treat them as ground truth.\n"
    "- Never invent user data. If something is not in bta_payload, say explicitly that it is not provided.\n"
    "- Search the web before finalizing your answer for current evidence, clinical guidelines, risk "
    "associations, and intervention evidence relevant to the results.\n"
    "- Keep the output clinically professional, structured, and actionable.\n"
    "- End with a short \"Evidence Notes\" section summarizing what your web search retrieved, with "
    "citations or attribution for each source.\n"
)

_MODE_INSTRUCTIONS: dict[Mode, str] = {
    Mode.SECTION_DEEP_DIVE: (
        "Report type: section_deep_dive.\n"
        "Start the output with the report type. Focus deeply on the single section named by section_id: "
        "interpret its results, explain the relevant risk factors, and give specific recommendations. "
        "Then briefly note how it interacts with the other highest-risk sections."
    ),
    Mode.FULL_REPORT: (
        "Report type: full_report.\n"
        "Start the output with the report type. Provide a comprehensive executive summary, then a "
        "section-by-section breakdown of the results, then a phased action plan (immediate, near term, "
        "long term)."
    ),
}


def build_instructions(mode: Mode) -> str:
    return f"{_BASE_INSTRUCTIONS}\n{_MODE_INSTRUCTIONS[mode]}"


def build_generation_input(request: AnalysisRequest) -> dict[str, Any]:
    return {
        "mode": request.mode.value,
        "section_id": request.section_id,
        "bta_payload": request.bta_payload,
    }


def serialize_generation_input(generation_input: dict[str, Any]) -> str:
    return json.dumps(generation_input, ensure_ascii=True)
