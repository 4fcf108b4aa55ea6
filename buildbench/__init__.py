"""
Image build benchmark harness.

Times the container engine CLI against a library-based build client across
build contexts of different shapes: none, many small files, one large file,
and the working directory itself. The CLI lives in ``buildbench.main``; the
Docker SDK build client in ``buildbench.client`` is kept import-light since
its start-up time is part of what gets measured.
"""

__version__ = "0.1.0"
