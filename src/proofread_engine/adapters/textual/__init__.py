"""Textual adapter utilities for the proofreading engine."""

from .controller import CorrectionUIHooks, TextualCorrectionAdapter

__all__ = ["CorrectionUIHooks", "TextualCorrectionAdapter"]
