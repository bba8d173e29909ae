"""Shared layout constants used across the library, API, and UI payloads."""


class LayoutConstants:
    """Single source of truth for print geometry and default placement."""

    # Print resolution
    RESOLUTION_DPI = 300
    MM_PER_INCH = 25.4

    # Paper table (mm, unordered pair; orientation decides width/height)
    PAPER_SIZES = {
        "L": (89, 127),
        "2L": (127, 178),
    }
    DEFAULT_PAPER = "L"
    DEFAULT_ORIENTATION = "landscape"

    # Ingestion
    MAX_IMAGES = 4
    DEFAULT_IMAGE_WIDTH_MM = 40
    CASCADE_ORIGIN_PX = 50
    CASCADE_STEP_PX = 50

    # Drag snapping
    SNAP_MM = 1

    # Crop: explicit mm targets may not exceed the longest paper side
    MAX_CROP_TARGET_MM = max(max(size) for size in PAPER_SIZES.values())

    # Output
    BACKGROUND_COLOR = "#FFFFFF"
    JPEG_QUALITY = 100
    EXPORT_BASENAME = "layout_image"

    # Preview only
    THUMBNAIL_MAX_PX = 160
    GRID_SPACING_MM = 10
    GRID_COLOR = "#D0D0D0"
