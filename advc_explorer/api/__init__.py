"""HTTP adapter for the explorer views."""
