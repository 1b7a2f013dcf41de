"""Output writers, artifact naming and run summary persistence."""
