"""Read trimming filters."""

from .quality import Fragment, TrimPolicy, extract_fragments, tag_mismatches

__all__ = ["Fragment", "TrimPolicy", "extract_fragments", "tag_mismatches"]
