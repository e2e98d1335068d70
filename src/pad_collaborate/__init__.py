"""Keep users, groups and pads consistent in a key-value store."""
