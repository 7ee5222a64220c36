"""Optional job-description drafting collaborator.

No provider ships with the engine. Front ends plug in a DescriptionGenerator;
without one, or when it fails, a fixed placeholder is returned so posting a
job never depends on the collaborator.
"""

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

UNAVAILABLE = "AI generation unavailable. Please write description manually."
FAILED = "Error generating content. Please try again."
EMPTY = "Could not generate description."


def build_prompt(title: str, company: str, location: str) -> str:
    """Assemble the drafting prompt for a single posting."""
    return (
        f'Write a compelling and professional job description for a "{title}" '
        f'position at "{company}" located in "{location}".\n'
        "Structure it with an Introduction, Key Responsibilities, and Requirements.\n"
        "Keep it concise (approx 150-200 words) but engaging.\n"
        "Format it in Markdown."
    )


class DescriptionGenerator(ABC):
    """Base class for text-generation backends."""

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Unique identifier for this backend."""

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """Return generated text for ``prompt``. May raise on any failure."""


def generate_job_description(
    generator: DescriptionGenerator | None,
    title: str,
    company: str,
    location: str,
) -> str:
    """Draft a description, degrading to a placeholder string instead of raising."""
    if generator is None:
        logger.warning("No description generator configured")
        return UNAVAILABLE

    try:
        text = generator.complete(build_prompt(title, company, location))
    except Exception:
        logger.warning(
            "Description generation failed via '%s'", generator.provider_id, exc_info=True,
        )
        return FAILED

    if not text or not text.strip():
        return EMPTY
    return text.strip()
