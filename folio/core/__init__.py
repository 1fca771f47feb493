"""Shared infrastructure: exceptions, logging, validation, paths."""
