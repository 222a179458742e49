"""Device runtime helpers (adb controller, probe, dispatcher)."""
