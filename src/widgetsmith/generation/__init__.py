"""LLM-driven interactor and spec generation."""
