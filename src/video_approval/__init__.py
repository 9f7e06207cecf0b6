"""Policy-compliance scoring of short videos with Gemini."""

__version__ = "0.1.0"
