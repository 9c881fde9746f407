"""Model constants shared by the decoders, crop geometry and solver."""

NUM_LANDMARKS = 66

# Heatmap model (STANDARD): 224x224 RGB input, 3 x 66 channels of 28x28 output
HEATMAP_INPUT_SIZE = 224
HEATMAP_GRID = 28
HEATMAP_CELLS = 784  # 28 * 28
HEATMAP_RES = 223.0  # HEATMAP_INPUT_SIZE - 1
HEATMAP_GRID_MAX = 27.0  # HEATMAP_GRID - 1
HEATMAP_ROUND_BIAS = 0.1

# Regression model (EFFICIENT): 114x114 grayscale input, 132 values output
REGRESSION_INPUT_SIZE = 114
REGRESSION_MEAN = 0.445313568967
REGRESSION_STD = 0.269246187

# Logit decode
LOGIT_EPS = 1e-7
LOGIT_SCALE = 16.0

# Crop margins relative to detection size
CROP_MARGIN = 0.1
CROP_CHIN_MARGIN = 0.1

# Landmark pairs are (row, col): vertical coordinate first. Pinned until
# confirmed against reference output; set row_major=False on decoders for (x, y).
ROW_MAJOR_LANDMARKS = True

# Face selection measures detector-space box centres against the centre of
# this space: "frame" (caller's image dimensions) or "detector" (detector
# input dimensions, the space the boxes are in). Pinned to "frame".
SELECTION_FRAME = "frame"
SELECTION_DETECTOR = "detector"
SELECTION_CENTER_SPACE = SELECTION_FRAME
