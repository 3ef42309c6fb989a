"""Domain models and entities.

Why:
- Pure, strict data structures (Pydantic v2 / frozen dataclasses) live here.
- The domain knows nothing about HTTP, CLI or prompts: only the flashcard concepts.
"""
