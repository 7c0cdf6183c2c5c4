# src/agent/__init__.py
"""Process-level helpers shared by NPC entrypoints."""
