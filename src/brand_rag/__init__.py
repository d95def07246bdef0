"""brand-rag: retrieval-augmented grounding for brand content generation."""

__version__ = "0.1.0"
