"""
HTTP clients for the Qiita API.
"""
