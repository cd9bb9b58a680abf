"""Entry point for callers: normalize fences, then extract segments.

Streaming callers re-parse the whole transcript every time a chunk arrives and once
more when the turn completes. Each call is independent of the previous ones.
"""

from collections import OrderedDict
from typing import List, Optional, Tuple

from . import config
from .extractor import extract
from .fences import normalize
from .segments import Segment


def parse(raw_transcript: str) -> List[Segment]:
    """Segments of the transcript; offsets refer to normalize(raw_transcript)."""
    return extract(normalize(raw_transcript or ""))


class TranscriptParser:
    """parse() with a small memo of recent transcripts.

    Results are identical to the module-level parse(); repeated calls with an
    unchanged transcript (UI re-renders, the final "turn complete" call) are served
    from the memo.
    """

    def __init__(self, cache_size: Optional[int] = None):
        size = config.PARSE_CACHE_SIZE if cache_size is None else cache_size
        self._cache_size = max(0, int(size))
        self._cache: "OrderedDict[str, Tuple[Segment, ...]]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def parse(self, raw_transcript: str) -> List[Segment]:
        text = raw_transcript or ""
        if self._cache_size == 0:
            return parse(text)
        cached = self._cache.get(text)
        if cached is not None:
            self._cache.move_to_end(text)
            self.hits += 1
            return list(cached)
        self.misses += 1
        segments = parse(text)
        self._cache[text] = tuple(segments)
        while len(self._cache) > self._cache_size:
            self._cache.popitem(last=False)
        return segments

    def clear(self) -> None:
        self._cache.clear()
