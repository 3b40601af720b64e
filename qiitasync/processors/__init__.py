"""
Codecs for the local post file format.
"""
