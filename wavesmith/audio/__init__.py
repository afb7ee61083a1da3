"""Audio buffers: WAV framing, timeline assembly and compressed encoding.

Compression shells out to ffmpeg; everything else is pure Python.
"""
