# Size of sectors handed to the patch mesher.
SECTOR_SIZE = 16 #width and depth (x and z)

# Block data values are 0-15; renderer masks cover these bits.
BLOCK_DATA_VALUES = 16

# Patch list build worker count (one shared renderer instance per block type).
PATCH_WORKERS = 4

# Y layers per mesher job; smaller batches interleave workers more.
PATCH_LAYERS_PER_JOB = 8

# Check returned texture indices against the renderer's declared maximum.
# Costs one pass over every patch list; turn off once renderers are trusted.
VALIDATE_PATCHES = True

# Rotated patch coordinates are rounded to this many digits to drop float noise.
PATCH_SNAP_DIGITS = 9

# Log threshold: DEBUG, INFO, WARN, ERROR.
LOG_LEVEL = "INFO"

# Enable ANSI colors in logs.
LOG_COLOR = True

# Log a summary line for every sector patch build.
LOG_PATCH_BUILD = False
