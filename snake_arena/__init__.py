"""Server-authoritative multiplayer Snake."""

__all__ = [
    "bot",
    "client",
    "collision",
    "config",
    "constants",
    "food",
    "grid",
    "main",
    "protocol",
    "registry",
    "snake",
    "spawner",
    "world",
]
