"""AI collaborators. Optional: the engine never depends on them."""
