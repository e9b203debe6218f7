"""FlipArt Studio: image generation, assistant chat and audio analysis."""

__version__ = "0.1.0"
