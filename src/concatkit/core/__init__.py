"""Shared configuration, error and logging primitives."""
