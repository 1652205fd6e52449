"""Tool Sync - Composio to ElevenLabs voice agent tool synchronization"""

__version__ = "1.0.0"
