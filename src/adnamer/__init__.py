"""adnamer: name ad videos in Google Drive from their speech transcripts."""

__version__ = "0.1.0"
