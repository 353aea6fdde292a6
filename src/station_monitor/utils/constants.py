"""
Constants used throughout the station monitor.

Colors are BGR tuples (OpenCV order). A fourth component, when present,
is an alpha multiplier in [0, 1].
"""

# Template styling
TEMPLATE_COLOR = (0, 255, 255)  # yellow
TEMPLATE_DASH_COLOR = (255, 255, 255)
UNTRACKED_DASH_COLOR = (68, 68, 68)
SELECTED_TEMPLATE_COLOR = (0, 255, 0)
PRESENT_COLOR = (0, 255, 0)
ABSENT_COLOR = (0, 0, 255)
TEMPLATE_HANDLE_RADIUS = 12
TEMPLATE_LINE_WIDTH = 2
STREAM_TEMPLATE_LINE_WIDTH = 4
UNTRACKED_ALPHA = 0.5

# Labels
LABEL_FONT_SCALE = 0.55
LABEL_FONT_THICKNESS = 1
LABEL_PADDING_X = 2
LABEL_PADDING_Y = 4
LABEL_BACKGROUND = (0, 0, 0)
LABEL_TEXT_COLOR = (255, 255, 255)

# Vignette outside the focused template
DARKEN_FILL = (0, 0, 0, 0.2)

# FPS readout
FPS_POSITION = (4, 28)
FPS_FONT_SCALE = 1.1
FPS_FONT_THICKNESS = 3
FPS_LOW_THRESHOLD = 5
FPS_MID_THRESHOLD = 15
FPS_LOW_COLOR = (29, 55, 237)  # #ed371d
FPS_MID_COLOR = (28, 186, 243)  # #f3ba1c
FPS_HIGH_COLOR = (28, 243, 94)  # #5ef31c
FPS_OUTLINE_COLOR = (0, 0, 0)
FPS_WINDOW_SIZE = 30  # Frames averaged for the FPS readout

# Task overlay
REMAINING_STEP_COLOR = (0, 128, 0)  # green
REMAINING_STEP_LINE_WIDTH = 5
ALL_STEPS_COLOR = (128, 128, 128)  # grey
ALL_STEPS_LINE_WIDTH = 2
ALL_STEPS_DASH = (5, 10)

# Presentation
DEFAULT_ASPECT = (16, 9)
DEFAULT_REFRESH_RATE = 60.0
DEFAULT_CONTAINER_WIDTH = 1280

# Stream source
STREAM_PATH = "/api/v1/detectors/{detector_id}/stream"
DEFAULT_PLACEHOLDER_SIZE = (640, 360)
PLACEHOLDER_BACKGROUND = (204, 204, 204)
PLACEHOLDER_TEXT_COLOR = (150, 150, 150)
STREAM_RECONNECT_DELAY = 2.0  # Seconds between reopen attempts
STREAM_OPEN_TIMEOUT = 5.0  # Seconds to wait for the stream to connect
STREAM_READ_TIMEOUT = 5.0  # Seconds to wait for one frame

# Snapshot output
SNAPSHOT_DIR = "/tmp/station-monitor"
DEFAULT_SNAPSHOT_PORT = 8085
DEFAULT_SNAPSHOT_INTERVAL = 0.5  # Seconds between latest.jpg writes

# Environment variables
ENV_BACKEND_URL = "BACKEND_URL"
ENV_DETECTOR_ID = "DETECTOR_ID"
