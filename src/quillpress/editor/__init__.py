"""Editor-side helpers: draft autosave and the HTTP save target."""

from .autosave import AutosaveSession, DraftSink, EditorDraft
from .client import ApiDraftSink

__all__ = ["ApiDraftSink", "AutosaveSession", "DraftSink", "EditorDraft"]
