"""Agent scripts that drive the gymnasium environment."""
