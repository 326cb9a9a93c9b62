"""Stack-based expression calculator: engine, history, console and PySide6 UI."""
