"""PromptStudio - script, image and voice generation against hosted AI APIs."""

__version__ = "0.3.0"
