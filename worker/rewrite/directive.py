"""Rewrite directives: what to fix and how to ask for it."""

from dataclasses import dataclass, field

from worker.scoring.calculator import ContentScores

# Order in which weak dimensions are listed to the model
DIMENSION_ORDER = ("fact_check", "aeo", "seo", "readability", "engagement", "geo")

DIMENSION_LABELS = {
    "fact_check": "Fact-Check",
    "aeo": "AEO",
    "seo": "SEO",
    "readability": "Readability",
    "engagement": "Engagement",
    "geo": "Local (GEO)",
}

DIMENSION_GUIDANCE = {
    "fact_check": """**Fix Factual Accuracy:**
- Remove or qualify unverifiable claims
- Avoid "studies show", "research proves" or percentages without a source
- Prefer "often", "typically", "can help", "many find"
- Focus on process and how-to content, not unverifiable outcome promises""",
    "aeo": """**Improve AI Answer Optimization:**
- Make the first paragraph a clear, quotable answer (2-3 sentences)
- Add an FAQ section (4-8 Q&As) unless the piece is opinion, news or a personal story
- Define key terms clearly
- Use numbered steps for how-to content""",
    "seo": """**Improve Structure & SEO:**
- Add clear H2/H3 headers to break up the content
- Preserve every original [link](url) exactly
- Keep a logical flow from section to section""",
    "readability": """**Improve Readability:**
- Break up long sentences (aim for 15-20 words)
- Use shorter paragraphs (3-5 sentences)
- Simplify complex words without dumbing the content down""",
    "engagement": """**Improve Engagement:**
- Open with a hook (question, surprising fact, clear benefit)
- Use bullet points and lists for scannable content
- Bold **key terms** sparingly
- Close with a call to action when it fits""",
    "geo": """**Improve Local Relevance:**
- Mention the city and the areas served naturally
- State the service area explicitly
- Include business details (phone, address, hours) when known""",
}

PROMPT_TEMPLATE = """You are a professional content editor improving an EXISTING piece of content. Keep the same topic and subject matter; do not write about anything else.

**Core rules:**
- Preserve the original topic, voice, links and anything already working
- Improve clarity, accuracy and structure only where it helps the reader
- Never add generic filler to hit a metric

**Iteration {iteration}/{max_iterations} - current AISO score: {current_score}/100 (target {threshold})**
{progress}
**Scores below target:**
{weak_lines}
{claims_section}
**Improvement priorities:**
{guidance}

**Current content:**
{content}

**Output format:**
Return ONLY a JSON object:
{{"content": "<improved content in markdown>", "title": "<optional improved title>", "metaDescription": "<optional improved meta description>", "changes": ["<short description of each change>"]}}"""


@dataclass
class RewriteDirective:
    """What one rewrite iteration should fix."""

    iteration: int
    max_iterations: int
    threshold: int
    current_score: int
    original_score: int
    weak_dimensions: dict[str, int] = field(default_factory=dict)
    problematic_claims: list[str] = field(default_factory=list)

    def to_prompt(self, content: str) -> str:
        weak_lines = "\n".join(
            f"- {DIMENSION_LABELS[name]}: {score}/100" for name, score in self.weak_dimensions.items()
        ) or "- none"

        claims_section = ""
        if self.problematic_claims:
            claims = "\n".join(
                f'{i}. "{claim}" - remove it or add a qualifier ("typically", "often", "can", "may")'
                for i, claim in enumerate(self.problematic_claims, start=1)
            )
            claims_section = f"\n**Problematic claims to fix:**\n{claims}\n"

        progress = ""
        if self.iteration > 1:
            trend = (
                "Keep improving quality."
                if self.current_score > self.original_score
                else "Score has not improved - focus on preserving what works."
            )
            progress = f"Started at {self.original_score}/100, now at {self.current_score}/100. {trend}\n"

        guidance = "\n\n".join(DIMENSION_GUIDANCE[name] for name in self.weak_dimensions)

        return PROMPT_TEMPLATE.format(
            iteration=self.iteration,
            max_iterations=self.max_iterations,
            current_score=self.current_score,
            threshold=self.threshold,
            progress=progress,
            weak_lines=weak_lines,
            claims_section=claims_section,
            guidance=guidance or "- General polish only",
            content=content,
        )

    def to_dict(self) -> dict:
        return {
            "iteration": self.iteration,
            "threshold": self.threshold,
            "current_score": self.current_score,
            "weak_dimensions": self.weak_dimensions,
            "problematic_claims": self.problematic_claims,
        }


def weak_dimensions(scores: ContentScores, threshold: int) -> dict[str, int]:
    """Sub-scores below the threshold, in fixed dimension order."""
    weak = {}
    for name in DIMENSION_ORDER:
        value = scores.components.get(name)
        if value is not None and value < threshold:
            weak[name] = value
    return weak


def build_directive(
    scores: ContentScores,
    threshold: int,
    iteration: int,
    max_iterations: int,
    original_score: int,
    problematic_claims: list[str] | None = None,
) -> RewriteDirective:
    return RewriteDirective(
        iteration=iteration,
        max_iterations=max_iterations,
        threshold=threshold,
        current_score=scores.aiso_score,
        original_score=original_score,
        weak_dimensions=weak_dimensions(scores, threshold),
        problematic_claims=list(problematic_claims or []),
    )
