"""Logging and event plumbing shared by the engine components."""
