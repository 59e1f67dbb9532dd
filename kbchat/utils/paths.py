"""
Path utilities for kbchat data storage.
"""
import os
from pathlib import Path

def get_kbchat_home() -> Path:
    """Get the kbchat home directory, creating if necessary."""
    # Allow override via environment variable
    if 'KBCHAT_HOME' in os.environ:
        home = Path(os.environ['KBCHAT_HOME'])
    else:
        home = Path.home() / '.kbchat'

    home.mkdir(parents=True, exist_ok=True)
    return home

def get_knowledge_base_dir() -> Path:
    """Get the directory holding the knowledge-base collections."""
    return get_kbchat_home() / 'knowledge_base'
