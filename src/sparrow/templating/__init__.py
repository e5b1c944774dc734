"""Template rendering through a pluggable view engine."""
