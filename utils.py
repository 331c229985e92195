import math

# Import constants from config.py
import config # Import the config module
from config import CHUNK_SIZE as CONFIG_CHUNK_SIZE

CHUNK_SIZE = CONFIG_CHUNK_SIZE

def debug_print(*args, **kwargs):
    # Access DEBUG_MODE directly from the config module
    if config.DEBUG_MODE:
        print(*args, **kwargs)

def chunk(ids, max_size=CHUNK_SIZE):
    """Split ids into consecutive lists of at most max_size items.

    Every list except the last holds exactly max_size ids. An empty input
    gives an empty list, never a single empty chunk.
    """
    if max_size < 1:
        raise ValueError(f"max_size must be at least 1, got {max_size}")
    ids = list(ids)
    return [ids[start:start + max_size] for start in range(0, len(ids), max_size)]

def chunk_count(total, max_size=CHUNK_SIZE):
    """Number of chunks chunk() produces for total ids."""
    return math.ceil(total / max_size) if total else 0

def category_query(category):
    """Gmail search expression selecting every message in an inbox category."""
    return f"category:{category}"
