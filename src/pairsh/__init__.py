"""pairsh: drive an AI pair-programming CLI from key chords in your terminal."""

__version__ = "0.1.0"
