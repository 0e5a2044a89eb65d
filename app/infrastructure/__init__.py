"""Infrastructure: persistence, cache, security and external clients."""
