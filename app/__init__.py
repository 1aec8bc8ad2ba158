"""Host-facing helpers: project manager, files, validation, editing, event log."""
