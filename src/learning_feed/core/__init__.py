"""Domain core: persistence, feed ranking, lifecycle and statistics."""
