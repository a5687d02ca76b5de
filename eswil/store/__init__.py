"""Line-oriented stores.

Public re-exports so callers can write::

    from eswil.store import OutputSink, load_processed_ids, read_words
"""

from eswil.store.checkpoint import load_processed_ids
from eswil.store.sink import OutputSink
from eswil.store.words import iter_words, read_words

__all__ = ["OutputSink", "iter_words", "load_processed_ids", "read_words"]
