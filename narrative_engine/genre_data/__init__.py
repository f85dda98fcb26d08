"""Bundled genre packs (grammar, voices and Markov corpus per genre)."""

from pathlib import Path

GENRE_DATA_DIR = Path(__file__).parent


def genre_dir(name: str) -> Path:
    """Directory of a bundled genre pack.

    Raises:
        FileNotFoundError: If no pack with that name is bundled.
    """
    path = GENRE_DATA_DIR / name
    if not path.is_dir():
        raise FileNotFoundError(f"Unknown genre pack: {name}")
    return path


def available_genres() -> list[str]:
    """Names of the bundled genre packs."""
    return sorted(p.name for p in GENRE_DATA_DIR.iterdir() if p.is_dir() and p.name != "__pycache__")
