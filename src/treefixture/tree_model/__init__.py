"""In-memory directory trees: generation and writing to disk."""
