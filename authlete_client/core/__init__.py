"""Core Authlete client components: API handles and the handle factory."""
