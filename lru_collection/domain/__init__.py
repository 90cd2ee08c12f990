"""Domain object contract shared by collections and their items."""
