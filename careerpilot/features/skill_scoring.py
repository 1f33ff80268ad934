"""Rule-based portfolio scoring over GitHub repository signals.

Every category in ``SKILL_CATEGORIES`` scores one point per distinct
vocabulary keyword found across all signals, capped at
``MAX_CATEGORY_SCORE``. The functions here are pure: the same signals always
produce the same breakdown, total and level.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from careerpilot.core.scoring import get_skill_vocabulary
from careerpilot.schemas.evaluation import (
    MAX_CATEGORY_SCORE,
    MAX_TOTAL_SCORE,
    SKILL_CATEGORIES,
    ImprovementSuggestion,
    SkillLevel,
    SuggestionResource,
)

_WORD_RE = re.compile(r"[a-z0-9][a-z0-9+#._-]*")
_SEGMENT_SPLIT_RE = re.compile(r"[_-]+")

FRONTEND_LANGUAGES = frozenset({"javascript", "typescript", "html", "css", "vue", "svelte"})
FRONTEND_KEYWORDS: tuple[str, ...] = (
    "react",
    "vue",
    "angular",
    "next",
    "nuxt",
    "svelte",
    "frontend",
    "web",
    "ui",
    "website",
    "app",
    "portfolio",
    "landing",
    "dashboard",
    "ecommerce",
    "blog",
)

# (lower bound, level, emoji), highest band first
SKILL_BANDS: tuple[tuple[int, SkillLevel, str], ...] = (
    (36, "Advanced", "🧠"),
    (26, "Industry-Ready", "🚀"),
    (16, "Intermediate", "🌱"),
    (0, "Beginner", "🐣"),
)

LEVEL_SUMMARIES: dict[str, str] = {
    "Advanced": "Excellent technical skills with production-ready capabilities.",
    "Industry-Ready": "Strong foundation with most industry-standard practices in place.",
    "Intermediate": "Good progress with solid fundamentals, ready for more advanced concepts.",
    "Beginner": "Learning the fundamentals with room for growth in multiple areas.",
}

LEVEL_MOTIVATION: dict[str, str] = {
    "Advanced": "Keep pushing boundaries and mentoring others! 🚀",
    "Industry-Ready": "You're ready for professional challenges. Keep refining! 🚀",
    "Intermediate": "Great progress! Focus on your weak areas to level up. 🚀",
    "Beginner": "Every expert was once a beginner. Keep building and learning! 🚀",
}

STRENGTH_DESCRIPTIONS: dict[str, str] = {
    "UI Complexity": "Building complex, multi-page applications",
    "Styling Mastery": "Modern CSS frameworks and styling techniques",
    "Component Structure": "Well-organized, reusable component architecture",
    "State Management": "Effective state management patterns",
    "API Integration": "Solid API integration and data handling",
    "Deployment": "Active deployment and hosting practices",
    "Code Quality": "Clean, well-structured code organization",
    "Documentation": "Good documentation and project descriptions",
}

CATEGORY_SUGGESTIONS: dict[str, dict[str, Any]] = {
    "Testing & Error Handling": {
        "title": "Implement Comprehensive Testing",
        "description": (
            "Add Jest + React Testing Library to your main project. Include unit tests for components "
            "and integration tests for user flows."
        ),
        "resource": {
            "topic": "React Testing Best Practices",
            "link": "https://testing-library.com/docs/react-testing-library/intro/",
        },
        "estimated_time_hours": 8,
    },
    "Accessibility": {
        "title": "Accessibility Audit & Implementation",
        "description": (
            "Use axe-core to audit your apps, add proper ARIA labels, semantic HTML, and keyboard navigation support."
        ),
        "resource": {"topic": "Web Accessibility Guidelines", "link": "https://web.dev/accessibility/"},
        "estimated_time_hours": 6,
    },
    "Authentication": {
        "title": "Authentication System Integration",
        "description": (
            "Implement a complete auth flow with JWT tokens, protected routes, and user session management "
            "using Firebase or Auth0."
        ),
        "resource": {"topic": "Firebase Authentication", "link": "https://firebase.google.com/docs/auth/web/start"},
        "estimated_time_hours": 10,
    },
    "Deployment": {
        "title": "Deploy Your Applications",
        "description": (
            "Learn deployment strategies using Vercel, Netlify, or similar platforms. "
            "Ensure all projects are live and accessible."
        ),
        "resource": {"topic": "Deployment Guide", "link": "https://vercel.com/docs"},
        "estimated_time_hours": 4,
    },
    "Animation & UX Polish": {
        "title": "Add Smooth Animations",
        "description": (
            "Implement Framer Motion or CSS animations to enhance user experience with smooth transitions "
            "and micro-interactions."
        ),
        "resource": {"topic": "Framer Motion Guide", "link": "https://www.framer.com/motion/"},
        "estimated_time_hours": 6,
    },
}


def _text_tokens(text: str) -> set[str]:
    tokens: set[str] = set()
    for word in _WORD_RE.findall(text.lower()):
        word = word.strip("._-")
        if not word:
            continue
        tokens.add(word)
        for segment in _SEGMENT_SPLIT_RE.split(word):
            if not segment:
                continue
            tokens.add(segment)
            if "." in segment:
                # next.js -> nextjs, next, js
                tokens.add(segment.replace(".", ""))
                tokens.update(part for part in segment.split(".") if part)
    return tokens


@dataclass(frozen=True)
class RepositorySignal:
    """Evidence extracted from one repository."""

    name: str
    description: str = ""
    language: str | None = None
    topics: tuple[str, ...] = field(default_factory=tuple)
    homepage: str | None = None
    size_kb: int = 0
    stars: int = 0
    forks: int = 0

    @classmethod
    def from_github(cls, payload: Mapping[str, Any]) -> "RepositorySignal":
        topics = payload.get("topics") or []
        return cls(
            name=str(payload.get("name") or ""),
            description=str(payload.get("description") or ""),
            language=payload.get("language") or None,
            topics=tuple(str(topic).strip().lower() for topic in topics if str(topic).strip()),
            homepage=(payload.get("homepage") or "").strip() or None,
            size_kb=int(payload.get("size") or 0),
            stars=int(payload.get("stargazers_count") or 0),
            forks=int(payload.get("forks_count") or 0),
        )

    def tokens(self) -> set[str]:
        tokens = set(self.topics)
        tokens |= _text_tokens(self.name)
        tokens |= _text_tokens(self.description)
        if self.language:
            tokens.add(self.language.strip().lower())
        if self.homepage:
            tokens.add("homepage")
        if len(self.description.strip()) > 20:
            tokens.add("described")
        return tokens

    @property
    def is_frontend(self) -> bool:
        if self.forks == 0 and self.size_kb < 100:
            return False
        if (self.language or "").lower() in FRONTEND_LANGUAGES:
            return True
        haystack = f"{self.name} {self.description}".lower()
        if any(keyword in haystack for keyword in FRONTEND_KEYWORDS):
            return True
        return any(keyword in topic for topic in self.topics for keyword in FRONTEND_KEYWORDS)


def score_categories(
    signals: Iterable[RepositorySignal],
    vocabulary: Mapping[str, Iterable[str]] | None = None,
) -> dict[str, int]:
    vocab = vocabulary if vocabulary is not None else get_skill_vocabulary()
    tokens: set[str] = set()
    for signal in signals:
        tokens |= signal.tokens()

    breakdown: dict[str, int] = {}
    for category in SKILL_CATEGORIES:
        keywords = set(vocab.get(category, ()))
        breakdown[category] = min(MAX_CATEGORY_SCORE, len(keywords & tokens))
    return breakdown


def skill_level_for(total_score: int) -> tuple[SkillLevel, str]:
    if total_score < 0 or total_score > MAX_TOTAL_SCORE:
        raise ValueError(f"total_score must be between 0 and {MAX_TOTAL_SCORE}, got {total_score}")
    for lower_bound, level, emoji in SKILL_BANDS:
        if total_score >= lower_bound:
            return level, emoji
    return "Beginner", "🐣"


def build_justification(total_score: int, level: str, frontend_repos: int, total_repos: int) -> str:
    percent = round(total_score / MAX_TOTAL_SCORE * 100)
    return (
        f"Based on {frontend_repos} frontend repositories and {total_repos} total projects. "
        f"Score: {total_score}/{MAX_TOTAL_SCORE} ({percent}%). {LEVEL_SUMMARIES[level]}"
    )


def weak_categories(breakdown: Mapping[str, int]) -> list[str]:
    return sorted(category for category, score in breakdown.items() if score <= 1)


def improvement_suggestions(breakdown: Mapping[str, int], limit: int = 3) -> list[ImprovementSuggestion]:
    suggestions: list[ImprovementSuggestion] = []
    for category in weak_categories(breakdown)[:limit]:
        template = CATEGORY_SUGGESTIONS.get(category)
        if template is None:
            suggestions.append(
                ImprovementSuggestion(
                    title=f"Improve {category}",
                    description=(
                        f"Focus on enhancing your {category.lower()} skills through practice and implementation."
                    ),
                    resource=SuggestionResource(topic="Frontend Development", link="https://developer.mozilla.org/"),
                    estimated_time_hours=5,
                )
            )
            continue
        suggestions.append(ImprovementSuggestion.model_validate(template))
    return suggestions


def strengths_for(breakdown: Mapping[str, int], limit: int = 5) -> list[str]:
    strengths = [
        STRENGTH_DESCRIPTIONS.get(category, f"Strong {category.lower()} implementation")
        for category, score in breakdown.items()
        if score >= 2
    ]
    return sorted(strengths)[:limit]


def top_skills_for(signals: Iterable[RepositorySignal], breakdown: Mapping[str, int], limit: int = 5) -> list[str]:
    languages = {(signal.language or "") for signal in signals}
    skills: list[str] = []
    if "TypeScript" in languages:
        skills.append("TypeScript")
    elif "JavaScript" in languages:
        skills.append("JavaScript")

    if breakdown.get("Component Structure", 0) >= 2:
        skills.append("React")
    if breakdown.get("Styling Mastery", 0) >= 2:
        skills.append("CSS/Styling")
    if breakdown.get("API Integration", 0) >= 2:
        skills.append("API Integration")
    if breakdown.get("Deployment", 0) >= 2:
        skills.append("Deployment")
    skills.extend(["Git", "HTML"])
    return skills[:limit]
