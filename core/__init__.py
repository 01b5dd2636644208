"""Cross-cutting runtime helpers."""
