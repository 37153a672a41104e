"""Floor plan tracker: grid-snapped table layout per area with persistent state."""
