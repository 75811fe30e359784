"""Brand analysis results and the rules for building and cleaning them.

The analyzer is asked for a JSON object with the keys ``summary, audience,
tone, pillars, recommendations, offers, competitors, channels``. Whatever it
returns passes through :func:`normalize_analysis`, which fills empty sections
with default copy and keeps ``pillars`` and ``recommendations`` at 3 to 5
entries. Output that is not an object, or whose sections are neither text nor
lists of text, is malformed.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

if TYPE_CHECKING:
    from brands.domain.aggregates.evidence import Evidence

MIN_LIST_ITEMS = 3
MAX_LIST_ITEMS = 5
PLACEHOLDER_EXCERPT_LENGTH = 400

ANALYSIS_KEYS = (
    "summary",
    "audience",
    "tone",
    "pillars",
    "recommendations",
    "offers",
    "competitors",
    "channels",
)

DEFAULT_SUMMARY = "Brand summary will be refined based on future insights."
DEFAULT_AUDIENCE = "Target audience definition will be refined as more data is collected."
DEFAULT_TONE = "Brand tone is professional and consistent across channels."
DEFAULT_OFFERS = (
    "Core offers and value propositions will be detailed based on ongoing strategy."
)
DEFAULT_PILLARS = ("Brand Strategy", "Audience Engagement", "Content Excellence")
DEFAULT_COMPETITORS = ("Key competitors in the same category",)
DEFAULT_CHANNELS = ("Website", "Social Media", "Email", "Content")
DEFAULT_RECOMMENDATIONS = (
    "Refine your brand's strategic narrative.",
    "Clarify your ideal customer profile.",
    "Align content pillars with business objectives.",
)


class MalformedAnalysisError(ValueError):
    """Raised when analyzer output cannot be read as a brand analysis."""


def _scalar_text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)):
        return str(value)
    raise ValueError(f"expected text, got {type(value).__name__}")


def _lines(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        candidates: Iterable[Any] = value.splitlines()
    elif isinstance(value, (list, tuple)):
        candidates = value
    else:
        candidates = [value]
    return [text for text in (_scalar_text(item) for item in candidates) if text]


def _bounded(items: Sequence[str], defaults: Sequence[str]) -> tuple[str, ...]:
    """Trim to 5 entries and pad to 3 from defaults without duplicates."""
    result = list(items[:MAX_LIST_ITEMS])
    for default in defaults:
        if len(result) >= MIN_LIST_ITEMS:
            break
        if default not in result:
            result.append(default)
    return tuple(result)


class BrandAnalysis(BaseModel):
    """Structured brand insights produced by the analyzer.

    Text sections accept a string, a number or a list of lines. List
    sections accept a list or a newline separated string; blank entries are
    dropped. Empty sections take default copy, and ``pillars`` and
    ``recommendations`` always hold 3 to 5 entries.
    """

    summary: str = ""
    audience: str = ""
    tone: str = ""
    offers: str = ""
    pillars: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    competitors: tuple[str, ...] = ()
    channels: tuple[str, ...] = ()

    @field_validator("summary", "audience", "tone", "offers", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        if v is None:
            return ""
        if isinstance(v, (list, tuple)):
            return "\n".join(_lines(v))
        return _scalar_text(v)

    @field_validator(
        "pillars", "recommendations", "competitors", "channels", mode="before"
    )
    @classmethod
    def coerce_lines(cls, v: Any) -> list[str]:
        return _lines(v)

    @model_validator(mode="after")
    def fill_sections(self) -> "BrandAnalysis":
        """Fill empty sections and bound pillars and recommendations."""
        self.summary = self.summary or DEFAULT_SUMMARY
        self.audience = self.audience or DEFAULT_AUDIENCE
        self.tone = self.tone or DEFAULT_TONE
        self.offers = self.offers or DEFAULT_OFFERS
        self.pillars = _bounded(self.pillars, DEFAULT_PILLARS)
        self.recommendations = _bounded(self.recommendations, DEFAULT_RECOMMENDATIONS)
        self.competitors = self.competitors or DEFAULT_COMPETITORS
        self.channels = self.channels or DEFAULT_CHANNELS
        return self


def normalize_analysis(raw: Any) -> BrandAnalysis:
    """Build a BrandAnalysis from raw analyzer output.

    Args:
        raw: Parsed analyzer output

    Returns:
        BrandAnalysis with every section filled

    Raises:
        MalformedAnalysisError: If ``raw`` is not a mapping, carries none of
            the analysis keys, or holds a section that is not text or a list
            of text
    """
    if not isinstance(raw, Mapping):
        raise MalformedAnalysisError(
            f"Expected a JSON object, got {type(raw).__name__}"
        )
    if not any(key in raw for key in ANALYSIS_KEYS):
        raise MalformedAnalysisError("Analyzer output contains no analysis keys")

    try:
        return BrandAnalysis.model_validate(
            {key: raw[key] for key in ANALYSIS_KEYS if key in raw}
        )
    except PydanticValidationError as e:
        raise MalformedAnalysisError(str(e)) from e


def placeholder_analysis(brand_name: str, evidence_text: str = "") -> BrandAnalysis:
    """Fixed analysis stored when the analyzer cannot produce one."""
    excerpt = evidence_text[:PLACEHOLDER_EXCERPT_LENGTH]
    if excerpt:
        summary = (
            f"Analysis of {brand_name} based on provided evidence. "
            f"Key themes:\n{excerpt}..."
        )
    else:
        summary = (
            f"Initial profile for {brand_name}. Add evidence and re-run the "
            "analysis to replace this placeholder."
        )
    return BrandAnalysis(
        summary=summary,
        audience=(
            "Target audience inferred from the combination of user-provided "
            "URLs, descriptions, and social evidence."
        ),
        tone="Professional, brand-aligned communication style inferred from content.",
        offers=(
            "Value proposition synthesized from evidence, focusing on core "
            "benefits, differentiation, and customer outcomes."
        ),
        pillars=(
            "Brand Strategy",
            "Content Development",
            "Audience Engagement",
            "Market Positioning",
        ),
        recommendations=(
            "Refine brand positioning statements based on evidence.",
            "Develop detailed audience personas.",
            "Define a content calendar aligned to the strongest brand pillars.",
            "Monitor competitor messaging and update Brand Brain over time.",
        ),
        competitors=("Industry competitors inferred from context",),
        channels=("Website", "Social Media", "Email", "Content Marketing"),
    )


def build_evidence_text(evidence: Iterable[Evidence]) -> str:
    """Concatenate complete evidence into one labelled block.

    Each item renders as ``Evidence N [TYPE]: <content>``. Items that are not
    ``complete`` are skipped, so they can never reach the analyzer.
    """
    blocks = []
    number = 0
    for item in evidence:
        if not item.is_complete:
            continue
        number += 1
        blocks.append(f"Evidence {number} [{item.type.value.upper()}]: {item.content}")
    return "\n\n".join(blocks)
