"""Command-line interface for tauri-latest."""
