"""Database core: ordered tree, diffing, deferred queue, auth and error stubs."""
