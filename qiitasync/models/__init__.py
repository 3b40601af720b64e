"""
Data models for posts, tags and teams.
"""
