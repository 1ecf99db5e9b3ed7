"""formchat - conversational slot-filling for structured forms."""

__version__ = "0.1.0"
