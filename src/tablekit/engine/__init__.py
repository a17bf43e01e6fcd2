"""Schema detection, type inference, parsing, rendering and mutation."""
