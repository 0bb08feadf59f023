"""Constants for the OSM history animation pipeline."""

# 2005-04-01T00:00:00Z. No edit history is expected before this instant.
EPOCH = 1112313600

DECAY_FACTOR = 0.99  # per-frame attenuation of accumulated magnitude
COUNT_CAP = 65535    # per (frame, pixel) edit counter ceiling

MAX_RAMP_STEPS = 254  # 1 empty colour + 254 steps fits an 8-bit palette
EMPTY_INDEX = 0
OVERFLOW_INDEX = 255
GIF_PALETTE_SIZE = 256

PLAYBACK_FPS = 30
FRAME_DELAY_MS = (100 // PLAYBACK_FPS) * 10

PROJECTION_ORTHO = "ortho"
PROJECTION_EQUIRECT = "equirect"
PROJECTIONS = (PROJECTION_ORTHO, PROJECTION_EQUIRECT)
