"""Built-in CLI commands for uptimerobot."""
