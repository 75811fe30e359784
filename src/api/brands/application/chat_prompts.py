"""Prompt text for onboarding chat.

Each named step has a guide that tells the chat model what the user should
do next, and a fallback reply used when the model cannot be reached.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from brands.domain.aggregates import BrandBrain, BrandWorkspace, Evidence
from brands.domain.value_objects import NamedStep, OnboardingStatus

MAX_PROMPT_EVIDENCE = 5
EVIDENCE_EXCERPT_LENGTH = 140

FALLBACK_INTRO = (
    "I’m having a little trouble connecting to the full AI engine right now, "
    "but I can still guide you through onboarding."
)
STREAM_ERROR_SUFFIX = "\n\nError generating response."

_ACTION_ADD_EVIDENCE = "[ACTION:Add a website:add-evidence:secondary]"
_ACTION_ANALYZE = "[ACTION:Start Analysis:start-analysis:primary]"


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def onboarding_guide(
    step: NamedStep, evidence_count: int, brain_status: str, brain_has_content: bool
) -> str:
    """Phase, objective and suggested next step for the chat model."""
    if step is NamedStep.INTRO:
        return (
            "ONBOARDING PHASE: INTRODUCTION\n"
            "OBJECTIVE: Welcome the user, learn what the brand does and who it is "
            "for, then guide them to add evidence.\n"
            "ACTION PLAN:\n"
            "1. Greet the user warmly.\n"
            "2. Explain that you will help set up their Brand Brain.\n"
            "3. Ask one or two simple questions about the brand.\n"
            "4. Suggest adding a website, social profile, document or short "
            "description in the panel on the right.\n"
            f"5. Offer {_ACTION_ADD_EVIDENCE}"
        )
    if step is NamedStep.COLLECTING_EVIDENCE:
        ready = (
            "READY FOR ANALYSIS: Yes. Suggest starting the analysis now."
            if evidence_count >= 1
            else "READY FOR ANALYSIS: Not yet. Encourage adding one evidence item."
        )
        return (
            "ONBOARDING PHASE: EVIDENCE COLLECTION\n"
            "OBJECTIVE: Help the user add enough evidence for a strong analysis.\n"
            f"EVIDENCE COLLECTED: {_plural(evidence_count, 'item')}\n"
            "ACTION PLAN:\n"
            "1. Acknowledge each new item and say how it helps.\n"
            "2. Ask follow-ups such as whether this is their main website.\n"
            f"3. Once one item exists, offer {_ACTION_ANALYZE}\n"
            f"{ready}"
        )
    if step is NamedStep.WAITING_FOR_ANALYSIS:
        return (
            "ONBOARDING PHASE: READY FOR ANALYSIS\n"
            "OBJECTIVE: Confirm the user is ready and trigger the analysis.\n"
            f"EVIDENCE COLLECTED: {_plural(evidence_count, 'item')}\n"
            "ACTION PLAN:\n"
            "1. Reassure the user that the material is ready.\n"
            "2. Explain that the analysis builds their Brand Brain.\n"
            "3. Offer [ACTION:Yes, Analyze Now:start-analysis:primary]"
        )
    if step is NamedStep.ANALYZING:
        next_step = (
            "The Brand Brain is ready: move on to reviewing it section by section."
            if brain_has_content
            else "Reassure the user that progress shows on the right and that "
            "you will tell them when the Brand Brain is ready."
        )
        return (
            "ONBOARDING PHASE: ANALYSIS IN PROGRESS\n"
            "OBJECTIVE: Keep the user informed while the analysis runs.\n"
            f"BRAND BRAIN STATUS: {brain_status}\n"
            "ACTION PLAN:\n"
            "1. Explain that messaging, tone and positioning are being extracted.\n"
            "2. Invite questions while they wait.\n"
            f"SUGGESTED NEXT STEP: {next_step}"
        )
    if step is NamedStep.REVIEWING_BRAND_BRAIN:
        return (
            "ONBOARDING PHASE: BRAND BRAIN REVIEW\n"
            "OBJECTIVE: Walk through each Brand Brain section and refine it.\n"
            f"BRAND BRAIN HAS CONTENT: {'Yes' if brain_has_content else 'No'}\n"
            "ACTION PLAN:\n"
            "1. Go through summary, audience, tone, pillars, offers, competitors, "
            "channels and recommendations.\n"
            "2. For each, ask whether it feels accurate and what they would change.\n"
            "3. Offer [ACTION:Refine tone:refine-tone:secondary]\n"
            "4. When everything feels right, guide them to complete onboarding."
        )
    return (
        "ONBOARDING PHASE: COMPLETION\n"
        "OBJECTIVE: Celebrate completion and orient the user inside the workspace.\n"
        "ACTION PLAN:\n"
        "1. Congratulate the user.\n"
        "2. Explain that the Brand Brain is now active.\n"
        "3. Remind them they can refine it at any time."
    )


def fallback_reply(step: NamedStep, evidence_count: int) -> str:
    """Reply served with 200 when the chat model is unavailable."""
    if step is NamedStep.INTRO:
        body = (
            "To get started:\n"
            "• Tell me what your brand does and who it’s for.\n"
            "• Paste your main website URL or social profile into the right-hand panel.\n"
            "Once we have at least one source, we’ll move to analysis."
        )
    elif step is NamedStep.COLLECTING_EVIDENCE:
        body = (
            f"Right now you have {_plural(evidence_count, 'evidence item')}.\n\n"
            "Next steps:\n"
            "• Add more evidence on the right if you have it.\n"
            "• When you feel ready, start the analysis to build your Brand Brain."
        )
    elif step is NamedStep.WAITING_FOR_ANALYSIS:
        body = (
            "You’re ready for analysis.\n\n"
            "Next steps:\n"
            "• Click the analysis button on the right.\n"
            "• I’ll then build a Brand Brain with summary, audience, tone, pillars, "
            "offers, and more."
        )
    elif step is NamedStep.ANALYZING:
        body = (
            "Your brand is currently being analyzed.\n\n"
            "You can keep adding evidence or ask questions while this runs."
        )
    elif step is NamedStep.REVIEWING_BRAND_BRAIN:
        body = (
            "Your Brand Brain should now be visible on the right.\n\n"
            "Next steps:\n"
            "• Read through the summary, audience, tone, and pillars.\n"
            "• Edit anything that feels off directly in the right panel.\n"
            "• When it feels right, complete onboarding to activate your Brand Brain."
        )
    else:
        body = (
            "Your Brand Brain is already marked as complete.\n\n"
            "Next steps:\n"
            "• Use your Brand Brain to guide content and strategy.\n"
            "• You can always come back here to refine it."
        )
    return f"{FALLBACK_INTRO}\n\n{body}"


def evidence_context(evidence: Sequence[Evidence]) -> str:
    """Numbered excerpts of the first five items, empty when there are none."""
    if not evidence:
        return ""
    lines = []
    for number, item in enumerate(evidence[:MAX_PROMPT_EVIDENCE], start=1):
        excerpt = item.analyzed_content or item.value[:EVIDENCE_EXCERPT_LENGTH]
        lines.append(f"{number}. [{item.type.value}] {excerpt}…")
    return f"Collected Evidence ({len(evidence)} items):\n" + "\n".join(lines)


def build_system_prompt(
    workspace: BrandWorkspace,
    step: NamedStep,
    brain: BrandBrain | None,
    evidence: Sequence[Evidence],
    message: str,
    context: Any = None,
) -> str:
    """System prompt for one chat turn."""
    brain_status = brain.status.value if brain else OnboardingStatus.NOT_STARTED.value
    has_content = brain.has_content if brain else False
    guide = onboarding_guide(step, len(evidence), brain_status, has_content)
    content_line = (
        "BRAND BRAIN HAS CONTENT: Yes - ready for review"
        if has_content
        else "BRAND BRAIN HAS CONTENT: Not yet - needs analysis"
    )
    return "\n".join(
        [
            "You are a brand strategy onboarding assistant.",
            "Guide the user through onboarding one step at a time, calmly and "
            "conversationally.",
            "",
            f"CURRENT ONBOARDING STEP: {step.value}",
            f"BRAND NAME: {workspace.name}",
            f"BRAND SLUG: {workspace.slug}",
            "",
            guide,
            "",
            f"EVIDENCE CONTEXT: {evidence_context(evidence)}",
            "",
            "RULES:",
            "1. Always make the next action obvious.",
            "2. Use action buttons in the form [ACTION:label:type:variant] for key "
            "decisions.",
            "3. Relate the user's input to their onboarding progress.",
            "4. Never output raw JSON; speak to the user.",
            "",
            f"CURRENT EVIDENCE COUNT: {len(evidence)}",
            f"BRAND BRAIN STATUS: {brain_status}",
            content_line,
            "",
            f'USER\'S LAST MESSAGE: "{message}"',
            f"USER CONTEXT: {json.dumps(context or {}, indent=2, default=str)}",
        ]
    )
