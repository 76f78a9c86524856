"""
Configuration system for SCC detection evaluation.

Provides a centralized configuration dictionary containing data paths,
slice selection, indicator conventions and reporting settings.
"""


def get_default_config():
    """
    Returns the default configuration for detection evaluation runs.

    Returns:
        Dictionary containing all configuration parameters

    Configuration Categories:
        - Data paths: SCC results, binary masks, ROI tables, outputs
        - Slice selection: Z slice under evaluation
        - Indicator conventions: values meaning "detected" and "inside ROI"
        - Estimation conventions: cover index base, confidence level, group order
        - Reporting: rounding and progress display

    Example:
        >>> config = get_default_config()
        >>> config['SLICE_INDEX'] = 40
        >>> config['CONFIDENCE_LEVEL_INDEX'] = 1
    """
    config = {
        # ===== Data Paths =====
        "SCC_RESULT_PATH": "data/SCCcomp.npz",
        "BINARY_MASK_PATH": "data/binary.csv",
        "ROI_TABLE_DIR": "data/roiTables",
        "OUTPUT_DIR": "results",

        # ===== Slice Selection =====
        "SLICE_INDEX": 35,

        # ===== Indicator Conventions =====
        "DETECTED_VALUE": 1,
        "ROI_VALUE": 1,

        # ===== Estimation Conventions =====
        # Engine cover indices are 1-based
        "INDEX_BASE": 1,
        # No default level: must be chosen per study (0-based into alpha grid)
        "CONFIDENCE_LEVEL_INDEX": None,
        # (first, second) as passed to the estimation engine
        "GROUP_ORDER": ("Pathological", "Control"),

        # ===== ROI Batch =====
        "REGIONS": ["Region2"],
        "ROI_NUMBERS": ["18"],

        # ===== Reporting =====
        "METRIC_DECIMALS": 2,
        "SHOW_PROGRESS": True,
    }

    return config
