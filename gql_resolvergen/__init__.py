"""GraphQL resolver type generator."""
