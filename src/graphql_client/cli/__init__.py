"""Command line interface for graphql_client."""
