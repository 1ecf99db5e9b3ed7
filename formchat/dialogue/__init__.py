"""Slot-filling dialogue: extraction, composition and the turn pipeline."""

from formchat.dialogue.composer import ResponseComposer
from formchat.dialogue.engine import ANALYSIS_PLACEHOLDER, DialogueEngine
from formchat.dialogue.extraction import ExtractionResult, FieldExtractor, is_filler
from formchat.dialogue.result import PhaseTiming, StartResult, TurnPhase, TurnResult
from formchat.dialogue.template_loader import TemplateLoader

__all__ = [
    "ANALYSIS_PLACEHOLDER",
    "DialogueEngine",
    "ExtractionResult",
    "FieldExtractor",
    "is_filler",
    "ResponseComposer",
    "PhaseTiming",
    "StartResult",
    "TurnPhase",
    "TurnResult",
    "TemplateLoader",
]
