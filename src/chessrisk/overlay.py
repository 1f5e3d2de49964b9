"""
Presentation sinks for risk assessments.

A sink shows one RiskAssessment in a display slot identified by a stable id.
Showing again into the same slot replaces the previous content instead of
adding a second element.

- PageOverlaySink: fixed-position box injected into a live Playwright page
- ConsoleSink: plain-text summary on a stream, reprinted only on change
"""

import logging
import sys
from typing import Optional, Protocol, TextIO

from playwright.async_api import Page

from chessrisk.risk.models import RiskAssessment

logger = logging.getLogger(__name__)

# Styling of the injected box (bottom-right corner, dark translucent card)
OVERLAY_STYLE = {
    "position": "fixed",
    "bottom": "20px",
    "right": "20px",
    "padding": "10px",
    "background": "rgba(0, 0, 0, 0.8)",
    "color": "#fff",
    "borderRadius": "8px",
    "fontSize": "14px",
    "zIndex": "9999",
    "boxShadow": "0px 0px 10px rgba(255, 255, 255, 0.2)",
    "maxWidth": "250px",
}

# Creates the slot element on first use, then only swaps its content
_RENDER_JS = """
([slotId, html, style]) => {
    let box = document.getElementById(slotId);
    if (!box) {
        box = document.createElement("div");
        box.id = slotId;
        Object.assign(box.style, style);
        document.body.appendChild(box);
    }
    box.innerHTML = html;
}
"""

_REMOVE_JS = """
(slotId) => {
    const box = document.getElementById(slotId);
    if (box) box.remove();
}
"""


def _format_index(value: float, known: bool) -> str:
    # Indices are shown on a -100..100 scale
    text = f"{value * 100:.2f}"
    return text if known else f"{text} (unknown)"


def render_overlay_html(assessment: RiskAssessment) -> str:
    """HTML body of the in-page overlay box."""
    return (
        "<strong>Game Risk Prevision:</strong><br>"
        f"Win Probability: {assessment.win_probability * 100:.2f}%<br>"
        f"Point Gain:      {assessment.potential_point_gain:.2f}<br>"
        f"Point Loss:      {assessment.potential_point_loss:.2f}<br>"
        f"Estimated Risk:  {assessment.risk * 100:.2f}%<br>"
        "<br>"
        "<strong>Strength (-100 to 100):</strong><br>"
        f"Defense Index: <b>{_format_index(assessment.defense_index, assessment.defense_known)}</b><br>"
        f"Threat Index: <b>{_format_index(assessment.threat_index, assessment.threat_known)}</b><br>"
        "(Higher = Dangerous, Lower = Weaker)<br>"
    )


def render_summary(
    assessment: RiskAssessment,
    self_name: Optional[str] = None,
    opponent_name: Optional[str] = None,
) -> str:
    """Plain-text rendition for terminals and logs."""
    lines = []
    if self_name and opponent_name:
        lines.append(f"{self_name} vs {opponent_name}")
        lines.append("-" * 40)
    lines.extend([
        f"Win Probability:  {assessment.win_probability * 100:6.2f}%",
        f"Point Gain:       {assessment.potential_point_gain:6.2f}",
        f"Point Loss:       {assessment.potential_point_loss:6.2f}",
        f"Estimated Risk:   {assessment.risk * 100:6.2f}%",
        f"Defense Index:    {_format_index(assessment.defense_index, assessment.defense_known)}",
        f"Threat Index:     {_format_index(assessment.threat_index, assessment.threat_known)}",
    ])
    return "\n".join(lines)


class PresentationSink(Protocol):
    """Anything that can display an assessment in a named slot."""

    async def show(self, assessment: RiskAssessment, slot_id: str) -> None:
        ...

    async def clear(self, slot_id: str) -> None:
        ...


class PageOverlaySink:
    """Draws the overlay box into a live Playwright page."""

    def __init__(self, page: Page):
        self.page = page

    async def show(self, assessment: RiskAssessment, slot_id: str) -> None:
        await self.page.evaluate(_RENDER_JS, [slot_id, render_overlay_html(assessment), OVERLAY_STYLE])
        logger.debug("Overlay %s updated", slot_id)

    async def clear(self, slot_id: str) -> None:
        """Remove the slot element, e.g. after an assessment failed."""
        await self.page.evaluate(_REMOVE_JS, slot_id)


class ConsoleSink:
    """Prints summaries to a stream, skipping repeats for the same slot."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout
        self._rendered: dict[str, str] = {}

    async def show(self, assessment: RiskAssessment, slot_id: str) -> None:
        text = render_summary(assessment)
        if self._rendered.get(slot_id) == text:
            return
        self._rendered[slot_id] = text
        print(f"[{slot_id}]\n{text}", file=self.stream, flush=True)

    async def clear(self, slot_id: str) -> None:
        if self._rendered.pop(slot_id, None) is not None:
            print(f"[{slot_id}] cleared", file=self.stream, flush=True)
