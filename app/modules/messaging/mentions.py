"""Mention and hashtag extraction."""

import re
from dataclasses import dataclass, field
from typing import List

TOKEN_PATTERN = re.compile(r"([@#])([A-Za-z0-9_]+)")


@dataclass
class ExtractedTokens:
    mentions: List[str] = field(default_factory=list)
    hashtags: List[str] = field(default_factory=list)


class MentionExtractor:
    """Finds ``@handle`` and ``#tag`` tokens in message text.

    Every occurrence is returned in order of appearance, case preserved.
    Duplicates are kept; callers that notify users collapse them after
    resolving handles.

    Example:
        >>> MentionExtractor().extract("hi @bob and @@alice #launch")
        ExtractedTokens(mentions=['bob', 'alice'], hashtags=['launch'])
    """

    def extract(self, text: str) -> ExtractedTokens:
        tokens = ExtractedTokens()
        if not text:
            return tokens
        for marker, name in TOKEN_PATTERN.findall(text):
            if marker == "@":
                tokens.mentions.append(name)
            else:
                tokens.hashtags.append(name)
        return tokens

    def mentions(self, text: str) -> List[str]:
        return self.extract(text).mentions

    def hashtags(self, text: str) -> List[str]:
        return self.extract(text).hashtags
