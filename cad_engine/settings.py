"""Editor settings"""
# ============================================================================
# TOLERANCES
# ============================================================================

# Below this |D| three points are treated as collinear (3P circle / arc)
COLLINEAR_TOLERANCE = 1e-4

# Endpoints closer than this are considered coincident by PEDIT Join
JOIN_TOLERANCE = 0.001

# Dimensions measuring less than this are not created
DIMENSION_MIN_LENGTH = 0.001

# Segments shorter than this have no usable direction
LENGTH_EPSILON = 1e-10

# Pick distance (drawing units) used for entity hit testing
PICK_TOLERANCE = 5.0

# ============================================================================
# DEFAULTS
# ============================================================================

# Initial OFFSET distance, replaced by the last distance the user typed
DEFAULT_OFFSET_DISTANCE = 10.0

# Layer assigned to new entities when nothing else is current
DEFAULT_LAYER = "0"

# ACI color 256 means "by layer"
COLOR_BYLAYER = 256

# Maximum number of undo steps kept (None keeps everything)
UNDO_MAX_DEPTH = None

# Decimals used when echoing points and distances on the command line
DISPLAY_DECIMALS = 4
