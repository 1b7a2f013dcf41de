# src/pipeline/prompt_builder.py - v1
"""Assemble the generation prompt from the instruction template and a record."""

from __future__ import annotations

import json

from proposalgen.core.models import GenerationRequest, ProposalRecord

PROMPT_TEMPLATE = """{instruction}

---

PROPOSAL DATA TO FORMAT:

{record}

---

Generate the complete HTML document now."""


def serialize_record(record: ProposalRecord) -> str:
    return json.dumps(record.body, indent=2, ensure_ascii=False)


def build_request(
    instruction: str,
    record: ProposalRecord,
    max_tokens: int,
    temperature: float = 0.7,
) -> GenerationRequest:
    """Build the request for a record at the given output ceiling."""
    prompt = PROMPT_TEMPLATE.format(
        instruction=instruction.rstrip(),
        record=serialize_record(record),
    )
    return GenerationRequest(prompt=prompt, max_tokens=max_tokens, temperature=temperature)
