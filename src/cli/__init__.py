"""Command-line front end: click commands and terminal table formatting."""
