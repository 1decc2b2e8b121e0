"""Query expander - lexical variants from a synonym table."""

import json
import logging
import re
from pathlib import Path
from typing import Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_SYNONYMS: dict[str, list[str]] = {
    "learn": ["study", "understand", "grasp", "master", "acquire"],
    "work": ["job", "career", "employment", "profession"],
    "project": ["task", "assignment", "initiative", "endeavor"],
    "meeting": ["conference", "discussion", "session", "gathering"],
    "idea": ["concept", "thought", "notion", "proposal"],
    "problem": ["issue", "challenge", "difficulty", "obstacle"],
    "solution": ["answer", "fix", "resolution", "remedy"],
    "goal": ["objective", "target", "aim", "purpose"],
    "plan": ["strategy", "approach", "method", "scheme"],
    "result": ["outcome", "consequence", "effect", "conclusion"],
}


def load_synonyms(path: Optional[str]) -> dict[str, list[str]]:
    """Load a synonym table from JSON ({"term": ["related", ...]}).

    Falls back to the built-in table when no path is given or the file
    does not exist.
    """
    if not path:
        return dict(DEFAULT_SYNONYMS)

    synonyms_file = Path(path)
    if not synonyms_file.exists():
        logger.warning(f"Synonyms file {path} not found, using defaults")
        return dict(DEFAULT_SYNONYMS)

    with open(synonyms_file, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Synonyms file {path} must contain a JSON object")

    synonyms = {
        str(term).lower(): [str(s) for s in related]
        for term, related in data.items()
    }
    logger.info(f"Loaded {len(synonyms)} synonym entries from {path}")
    return synonyms


class QueryExpander:
    """Word-for-word synonym substitution."""

    def __init__(self, synonyms: Optional[Mapping[str, Sequence[str]]] = None):
        self._synonyms = {
            term.lower(): list(related)
            for term, related in (synonyms if synonyms is not None else DEFAULT_SYNONYMS).items()
        }

    def expand(self, query: str) -> list[str]:
        """Return the query followed by its synonym variants.

        The first element is always the query verbatim. Each variant
        replaces one whitespace-delimited word of the lower-cased query.
        """
        expansions = [query]
        lowered = query.lower()

        for word in lowered.split():
            related = self._synonyms.get(word)
            if not related:
                continue
            pattern = re.compile(rf"(?<!\S){re.escape(word)}(?!\S)")
            for synonym in related:
                variant = pattern.sub(lambda _: synonym, lowered, count=1)
                if variant not in expansions:
                    expansions.append(variant)

        return expansions
