"""revman: next-token completion for shell commands using a local Ollama server."""

__version__ = "0.1.0"
