"""Campus recruitment portal."""
