"""
Generic "label: value" scraper shared by the RSVP parsing strategies.
"""
import re
from functools import lru_cache
from typing import Optional, Sequence, Pattern

MAX_FIELD_LENGTH = 200

# Characters left over from separators like "Name - Jane" or "Name => Jane"
_LEADING_ARTIFACTS = " \t:;,.-=>*|–—•"


@lru_cache(maxsize=128)
def _label_pattern(label: str) -> Pattern:
    """Compile the pattern for one label.

    The label has to open a line (quote and bullet markers allowed) and end
    on a word boundary. The value runs to the end of that line.
    """
    words = [re.escape(word) for word in label.split()]
    return re.compile(
        r'^[ \t>*\-•]*' + r'[ \t]+'.join(words) + r'(?!\w)[ \t]*:?[ \t]*([^\r\n]*)',
        re.IGNORECASE | re.MULTILINE
    )


class FieldExtractor:
    """Extracts single-line field values by trying label synonyms in order."""

    def __init__(self, max_length: int = MAX_FIELD_LENGTH):
        self.max_length = max_length

    def extract(self, text: str, candidate_names: Sequence[str]) -> Optional[str]:
        """
        Return the value of the first label in ``candidate_names`` that matches.

        Args:
            text: Email body to search
            candidate_names: Label synonyms, highest priority first

        Returns:
            The cleaned value, or None if no candidate produced an acceptable one
        """
        if not text:
            return None

        for label in candidate_names:
            match = _label_pattern(label).search(text)
            if not match:
                continue

            value = self._clean(match.group(1))
            if value:
                return value

        return None

    def _clean(self, raw: str) -> Optional[str]:
        value = raw.strip().lstrip(_LEADING_ARTIFACTS)
        lines = value.splitlines()
        value = lines[0].strip() if lines else ""

        # Over-long values usually mean the pattern ran into unrelated text
        if not value or len(value) > self.max_length:
            return None
        return value


_default_extractor = FieldExtractor()


def extract_field(text: str, candidate_names: Sequence[str]) -> Optional[str]:
    """Module level shortcut using the default length limit."""
    return _default_extractor.extract(text, candidate_names)
