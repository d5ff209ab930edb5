"""TypeScript exporter module for protoc-gen-types-only."""

from .typescript import generate, translate_to_typescript

__all__ = ["generate", "translate_to_typescript"]
