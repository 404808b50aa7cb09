"""shiftsnake - deterministic core and local host for a snake game on a shifting maze."""
