"""Runtime services (telemetry) shared across agitlink."""
