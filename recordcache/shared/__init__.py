"""Shared cross-cutting helpers: logging and tracing. No cache logic."""
