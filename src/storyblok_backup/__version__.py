"""Version information for storyblok-backup."""

__version__ = "0.4.0"
