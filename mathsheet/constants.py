"""
MathSheet Constants Module
Contains unit symbols, display mappings, messages and default configuration.
"""


# =============================================================================
# MODE DETECTION CONSTANTS
# =============================================================================

# Literal token the evaluator reports as undefined when complex numbers are used
IMAGINARY_UNIT = 'i'

# Unit symbols that only resolve in the units evaluation mode
UNIT_SYMBOLS = frozenset({
    # Pressure
    'Pa', 'psi', 'bar',
    # Force
    'N', 'lbf',
    # Length
    'm', 'ft', 'in',
    # Time
    's',
    # Mass
    'lb', 'kg', 'g',
    # Other SI units
    'Hz', 'A', 'K', 'mol', 'cd',
})


# =============================================================================
# RESULT DISPLAY CONSTANTS
# =============================================================================

# Exponent characters used when rendering "m^2" as "m²"
SUPERSCRIPT_MAP = {
    '0': '⁰', '1': '¹', '2': '²', '3': '³', '4': '⁴',
    '5': '⁵', '6': '⁶', '7': '⁷', '8': '⁸', '9': '⁹',
    '-': '⁻',
}

DEFINITION_NOT_FOUND_TEMPLATE = "Definition not found: '{symbol}'"


# =============================================================================
# NOTIFICATION MESSAGES
# =============================================================================

MODE_SWITCH_MESSAGE = "Switched to {mode} mode"
COPIED_MESSAGE = "Copied line {line} to clipboard"
OPENED_MESSAGE = "Opened {name}"
SAVED_MESSAGE = "Saved {name}"


# =============================================================================
# CONFIGURATION DEFAULTS
# =============================================================================

DEFAULT_EVALUATOR_URL = "http://127.0.0.1:8001"
DEFAULT_EVALUATION_TIMEOUT = 5.0
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_FOCUS_AFTER_DELETE = "previous"

# File extensions
SUPPORTED_EXTENSIONS = ['.md', '.txt']

# Application metadata
APP_NAME = "MathSheet"
APP_VERSION = "1.0.0"
