"""
Sync Qiita posts with local markdown files.
"""

__version__ = "0.1.0"
