"""Command-line host for gitboot."""
