"""
gasnet/integrations/audit.py
============================
Narrative audit of a gas piping layout by an external text-generation service.

Public entry point:
    audit_system(network, client=None) -> str

The audit is best-effort: when the backend is not configured or fails, the
function logs the failure and returns UNAVAILABLE_MESSAGE instead of raising.
It is independent of the sizing verdicts.
"""
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Optional

from gasnet.adapters.snapshot.json_snapshot import network_to_dict
from gasnet.core.build.config import AuditConfig
from gasnet.core.models.network import Network

log = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "Audit currently unavailable. Please verify your internet connection."

SECTION_TITLES = ("SAFETY & COMPLIANCE", "PERFORMANCE & OPTIMIZATION")

_AUDIT_PROMPT = """Analyze this gas piping system layout for a professional engineering audit.
Nodes: {nodes}
Edges: {edges}

STRUCTURE YOUR RESPONSE EXACTLY AS FOLLOWS:
1. Provide EXACTLY TWO sections.
2. Section 1 title: "{title_1}"
3. Section 2 title: "{title_2}"
4. Provide EXACTLY 5 concise bullet points per section.
5. Use plain text or markdown bullets (-). No intro, no outro, no additional headers.

Base your audit on NFPA 54 / IFGC standards."""


def build_audit_prompt(network: Network) -> str:
    snap = network_to_dict(network)
    return _AUDIT_PROMPT.format(
        nodes=json.dumps(snap["nodes"]),
        edges=json.dumps(snap["edges"]),
        title_1=SECTION_TITLES[0],
        title_2=SECTION_TITLES[1],
    )


class AuditClient(ABC):
    """Text-generation backend used by the audit."""

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """Return free text for the prompt."""


class OpenAIAuditClient(AuditClient):
    """OpenAI chat completions backend."""

    def __init__(self, config: AuditConfig):
        import openai

        self.config = config
        self.client = openai.OpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout_s,
        )

    def complete(self, prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.config.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.config.temperature,
        )
        return response.choices[0].message.content or ""


def audit_system(network: Network, client: Optional[AuditClient] = None) -> str:
    """
    Ask the audit backend for commentary on the layout.
    Never raises; returns UNAVAILABLE_MESSAGE on any backend failure.
    """
    prompt = build_audit_prompt(network)
    try:
        if client is None:
            client = OpenAIAuditClient(AuditConfig.from_env())
        text = client.complete(prompt)
    except Exception:
        log.warning("narrative audit failed", exc_info=True)
        return UNAVAILABLE_MESSAGE

    text = (text or "").strip()
    if not text:
        log.warning("narrative audit returned empty text")
        return UNAVAILABLE_MESSAGE
    return text
