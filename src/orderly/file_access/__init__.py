"""
File access module: directory scanning and file manipulation.
"""
