# Glyph ramps, ordered from visually full to empty.

# Block elements: full block and the three shades (U+2588, U+2593, U+2592, U+2591)
DEFAULT_RAMP = ["█", "▓", "▒", "░", " "]

ASCII_RAMP = ["#", "*", ":", ".", " "]

# Symbol set used for the "braille" style (U+2623, U+2622, U+2616, U+2604)
BRAILLE_RAMP = ["☣", "☢", "☖", "☄", " "]
