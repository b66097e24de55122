"""Server-side API: configuration, models, Maps proxy, pricing and accounts."""
