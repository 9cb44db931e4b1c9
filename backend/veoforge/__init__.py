"""VeoForge - turn a narration script into a batch of Veo video clips."""

__version__ = "1.0.0"
