"""clipstitch — timeline stitching and scrubber previews.

Trim an ordered list of timeline clips out of their sources and join them
into one movie, either by stream copy or through an ffmpeg filter graph
with cross-fade transitions and synchronized audio. Also renders per-clip
waveform and frame-sprite thumbnails for timeline scrubbing.
"""
