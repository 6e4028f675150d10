"""Selection-aware LLM proofreading engine."""

__all__ = [
    "adapters",
    "config",
    "correction",
    "documents",
    "errors",
    "llm",
    "prompts",
    "runtime",
    "tasks",
]

__version__ = "0.1.0"
