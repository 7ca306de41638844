"""HTTP layer: viewer pages, Slack endpoints and the admin API."""
