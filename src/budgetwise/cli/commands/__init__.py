"""CLI command groups. Each module exposes register_commands(cli)."""
