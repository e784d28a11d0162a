"""
Utilities Package.

Console output and logging helpers shared by the engine and the CLI.
"""
