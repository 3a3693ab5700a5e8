"""Backends for rendering emitted artifacts (QuickFIX/J Java sources)."""

from .quickfixj import ARTIFACT_FILE_EXTENSION, render_artifact

__all__ = ["ARTIFACT_FILE_EXTENSION", "render_artifact"]
