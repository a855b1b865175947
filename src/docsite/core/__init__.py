"""Core domain logic: redirects and content documents."""
