"""Service layer: moderation rules, content policy and mirror sync."""
