"""
Constants
Centralised storage for numeric bounds, XPath spellings and separator characters.
"""
INT32_MIN = -2**31
INT32_MAX = 2**31 - 1

XPATH_TRUE = "true"
XPATH_FALSE = "false"
XPATH_NAN = "NaN"
XPATH_INFINITY = "Infinity"

PATH_SEPARATORS = ("\\", "/")
