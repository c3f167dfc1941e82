"""
Prompt attack detection

Simple pattern matching for prompt-injection attempts in search queries.
Queries that trip a pattern never reach the LLM; they are ranked by the heuristic.
"""

import re
import logging
from typing import Tuple, List

logger = logging.getLogger(__name__)


class PromptValidator:
    """
    Prompt-injection detector

    Regex patterns grouped by attack category. Kept narrow so ordinary
    spending queries ("10% on Amazon", "fuel + dining") pass.
    """

    def __init__(self):
        self.attack_patterns = {
            "system_override": [
                r"ignore\s+(previous|all|above)\s+instructions?",
                r"forget\s+(everything|all|previous)\s+(you|instructions?|rules|above)",
                r"disregard\s+(previous|all|above)\s+(instructions?|rules|prompts?)",
                r"override\s+system",
                r"reset\s+instructions?",
                r"system\s+prompt",
            ],
            "role_manipulation": [
                r"you\s+are\s+now\s+(a|an|the|my|in)\s+",
                r"act\s+as\s+(a|an|my|the)\s+.*\b(assistant|system|ai|admin|developer|chatbot|model)\b",
                r"pretend\s+(you'?re|to\s+be)",
                r"roleplay\s+as",
                r"new\s+instructions?:",
                r"from\s+now\s+on,?\s+(you|ignore|respond|reply|answer|only\s+(rank|return|output))\b",
            ],
            "output_hijack": [
                r"(return|output|respond\s+with)\s+(only\s+)?(this|the\s+following)\s+json",
                r"rank\s+.+\s+(first|on\s+top)\s+no\s+matter",
            ],
            "command_injection": [
                r"<script[\s\S]*?>",
                r"javascript:",
                r"exec\s*\(",
                r"eval\s*\(",
                r"__import__",
                r"system\s*\(",
            ],
            "encoding_tricks": [
                r"\\x[0-9a-f]{2}",
                r"\\u[0-9a-f]{4}",
                r"\\[0-7]{3}",
            ],
            "excessive_special_chars": [
                r"[^\w\s]{20,}",
                r"(.)\1{50,}",
            ],
        }

        self.compiled_patterns = {
            category: [re.compile(pattern, re.IGNORECASE) for pattern in patterns]
            for category, patterns in self.attack_patterns.items()
        }

    def validate(self, user_input: str) -> Tuple[bool, List[str]]:
        """
        Check a query for attack patterns

        Args:
            user_input: Raw query

        Returns:
            (is_valid, matched_categories)
        """
        if not user_input or not user_input.strip():
            return (True, [])

        matched_patterns = []
        for category, patterns in self.compiled_patterns.items():
            for i, pattern in enumerate(patterns):
                match = pattern.search(user_input)
                if match:
                    logger.debug("Pattern matched - category=%s pattern=#%d text=%r", category, i, match.group())
                    matched_patterns.append(category)
                    break  # one hit per category

        return (len(matched_patterns) == 0, matched_patterns)

    def sanitize(self, user_input: str) -> str:
        """Drop null bytes and collapse whitespace."""
        sanitized = user_input.replace("\x00", "")
        sanitized = re.sub(r"\s+", " ", sanitized)
        return sanitized.strip()
