"""Markdown summary of an exclusion directory."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from compat_excludes import __version__
from compat_excludes.registry import ExclusionIndex
from compat_excludes.utils.atomic import atomic_write_text
from compat_excludes.utils.logging import get_logger

logger = get_logger("reporter.summary")

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "summary.md.j2"


@dataclass
class SuiteSummary:
    """Exclusion counts for one suite."""

    suite: str
    excluded: int
    reasons: dict[str, int] = field(default_factory=dict)
    duplicates: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "suite": self.suite,
            "excluded": self.excluded,
            "reasons": self.reasons,
            "duplicates": self.duplicates,
        }


@dataclass
class ExclusionSummary:
    """
    Aggregated view of an exclusion index.

    Attributes:
        total_excluded: Number of excluded test cases over all suites
        suites: Per-suite summaries, sorted by suite name
        top_reasons: (reason, count) pairs, most frequent first
    """

    total_excluded: int = 0
    suites: list[SuiteSummary] = field(default_factory=list)
    top_reasons: list[tuple[str, int]] = field(default_factory=list)

    @classmethod
    def from_index(cls, index: ExclusionIndex) -> "ExclusionSummary":
        """Build a summary from a loaded index."""
        all_reasons: Counter[str] = Counter()
        suites = []

        for registry in index:
            reasons = Counter(entry.reason for entry in registry)
            all_reasons.update(reasons)
            suites.append(SuiteSummary(
                suite=registry.suite or "",
                excluded=len(registry),
                reasons=dict(reasons.most_common()),
                duplicates=registry.duplicates(),
            ))

        return cls(
            total_excluded=index.total_entries(),
            suites=suites,
            top_reasons=all_reasons.most_common(),
        )

    @property
    def has_duplicates(self) -> bool:
        return any(suite.duplicates for suite in self.suites)

    def to_dict(self) -> dict:
        return {
            "total_excluded": self.total_excluded,
            "suites": [suite.to_dict() for suite in self.suites],
            "top_reasons": [
                {"reason": reason, "count": count}
                for reason, count in self.top_reasons
            ],
        }


class SummaryRenderer:
    """Renders an ExclusionSummary through a Jinja2 Markdown template."""

    def __init__(self, templates_dir: Optional[Path] = None) -> None:
        """
        Initialize the renderer.

        Args:
            templates_dir: Directory containing ``summary.md.j2``
                (defaults to the bundled template)
        """
        self.templates_dir = Path(templates_dir or DEFAULT_TEMPLATES_DIR)

        # Markdown output: no HTML autoescaping
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    def render(self, summary: ExclusionSummary, title: str = "Excluded tests") -> str:
        template = self.env.get_template(TEMPLATE_NAME)
        return template.render(
            title=title,
            summary=summary,
            version=__version__,
            generated_at=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC"),
        )

    def write(
        self,
        summary: ExclusionSummary,
        path: Path,
        title: str = "Excluded tests",
    ) -> Path:
        """Render the summary and write it to ``path``."""
        path = Path(path)
        atomic_write_text(path, self.render(summary, title=title))
        logger.info("summary_written", path=str(path), suites=len(summary.suites))
        return path
