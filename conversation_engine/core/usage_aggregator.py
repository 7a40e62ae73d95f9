"""
Token usage aggregation and built-in tool result extraction.
"""
from typing import Any, Dict, List, Iterable, Optional

from .models import Message, NormalizedResponse, TokenUsage


class UsageAggregator:
    """Sums token usage across responses or messages."""

    @staticmethod
    def aggregate(responses: Iterable[NormalizedResponse]) -> TokenUsage:
        """
        Sum usage over every response, including intermediate tool-loop responses.
        """
        total = TokenUsage()
        for response in responses:
            total = total + response.usage
        return total

    @staticmethod
    def aggregate_messages(messages: Iterable[Message]) -> Optional[TokenUsage]:
        """
        Sum usage over assistant messages that carry it.

        Returns:
            The total, or None when no assistant message has usage
        """
        usages = [m.usage for m in messages if m.role == "assistant" and m.usage is not None]
        if not usages:
            return None
        total = TokenUsage()
        for usage in usages:
            total = total + usage
        return total


class ToolResultExtractor:
    """Flattens built-in tool results across a conversation's responses."""

    def __init__(self, responses: List[NormalizedResponse]):
        self.responses = responses

    @property
    def web_search_results(self) -> List[Dict[str, Any]]:
        return [r for response in self.responses for r in response.web_search_results]

    @property
    def code_interpreter_results(self) -> List[Dict[str, Any]]:
        return [r for response in self.responses for r in response.code_interpreter_results]

    @property
    def file_search_results(self) -> List[Dict[str, Any]]:
        return [r for response in self.responses for r in response.file_search_results]

    def all_results(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "web_search_results": self.web_search_results,
            "code_interpreter_results": self.code_interpreter_results,
            "file_search_results": self.file_search_results,
        }
