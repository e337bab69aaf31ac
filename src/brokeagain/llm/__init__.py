"""LLM collaborators."""
from .gemini import create_client, generate_text
from .extractor import ReceiptExtractor, ExtractionResult, RejectedItem, ReceiptItem
from .advisor import SpendingAdvisor, Suggestion

__all__ = [
    "create_client",
    "generate_text",
    "ReceiptExtractor",
    "ExtractionResult",
    "RejectedItem",
    "ReceiptItem",
    "SpendingAdvisor",
    "Suggestion",
]
