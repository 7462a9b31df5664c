"""Dispatcher core: configuration, schemas, errors and the dispatch pipeline."""
