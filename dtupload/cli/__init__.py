"""CLI commands for dtupload."""
