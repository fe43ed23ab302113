"""Host adapters that drive the engine from a UI toolkit."""
