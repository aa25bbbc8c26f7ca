"""Command-line tools: course file loading and report printing."""
