"""Command parsing, handlers and shell integration for an interactive command language."""