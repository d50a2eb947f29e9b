"""
Configuration for the edge conflict engine
"""

# Grid
GRID_SIZE = 20  # pixels per grid unit (1 unit = 1 ft)

# Placement validation
MAX_WALL_OVERLAP = 1  # shared wall thickness, grid units
SEARCH_RADIUS = 10  # nearest-valid-position search, grid units

# Segmentation
EPSILON = 1e-3  # cut point deduplication tolerance

# Picking
EDGE_PICK_TOLERANCE = 0.5  # grid units

# Components
DUPLICATE_OFFSET = 5  # grid units, applied on both axes
EDITING_PREFIX = "editing-"

# Document defaults
DEFAULT_FILE_NAME = "Untitled Project"
DEFAULT_ROOM_COLOR = "blue"
