"""
Core application engine for orchestrating the download process.

This package contains the primary logic. The `DownloadManager` resolves
albums and walks their track listings, delegating each track to the
`TrackProcessor`.
"""
