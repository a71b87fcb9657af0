"""
Shared constants for CCK-8 viability analysis.
"""

# Reserved treatment names
BLANK_GROUP = "Blank"
CONTROL_GROUP = "Control"

# Input record fields (long format)
TREATMENT_FIELD = "Treatment"
OD_FIELD = "OD450"

# Replicates are trimmed when population SD exceeds this fraction of the mean
OUTLIER_SD_FRACTION = 0.2
MIN_REPLICATES_FOR_TRIMMING = 3

CONTROL_VIABILITY = 100.0

# Display rounding
OD_DECIMALS = 3
VIABILITY_DECIMALS = 1

SUPPORTED_EXTENSIONS = (".csv", ".xlsx", ".xls")

CONTROL_COLOR = "#3498db"
TREATMENT_COLOR = "#2ecc71"
BAR_EDGE_COLOR = "#2c3e50"
