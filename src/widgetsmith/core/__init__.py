"""Change detection, source aggregation and JSX test-hook rewriting."""
