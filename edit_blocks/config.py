import os

# Debug logging knobs
DEBUG = os.getenv("EB_DEBUG", "").lower() in ("1", "true", "yes")
DEBUG_LOG_PATH = os.getenv("EB_DEBUG_LOG", "edit-blocks-debug.log")
# EB_DEBUG_DUMP_VERBOSE=1: write full transcripts to the debug log (no truncation).
DEBUG_DUMP_VERBOSE = os.getenv("EB_DEBUG_DUMP_VERBOSE", "false").lower() in ("1", "true", "yes")
DEBUG_DUMP_MAX_LINES = int(os.getenv("EB_DEBUG_DUMP_MAX_LINES", "20"))
DEBUG_DUMP_MAX_CHARS = int(os.getenv("EB_DEBUG_DUMP_MAX_CHARS", "2000"))

# Parser knobs
# Number of recent transcripts a TranscriptParser remembers (0 = re-parse every call).
PARSE_CACHE_SIZE = int(os.getenv("EB_PARSE_CACHE_SIZE", "8"))

# Continuation prompt: how much of the cut-off turn to quote back to the model.
CONTINUATION_TAIL_CHARS = int(os.getenv("EB_CONTINUATION_TAIL_CHARS", "400"))
