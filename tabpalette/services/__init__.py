"""Pure palette services: filtering, tags, daily notes and history."""
