"""Backend clients and logging helpers."""
