# Cell state constants centralized for modular imports
EMPTY = 0
FILLED = 1

# Minimap glyphs
GLYPH_EMPTY = "."
GLYPH_START = "S"
GLYPH_ENEMY = "E"
GLYPH_SPECIAL = "$"
GLYPH_BOSS = "B"

__all__ = ["EMPTY", "FILLED", "GLYPH_EMPTY", "GLYPH_START", "GLYPH_ENEMY", "GLYPH_SPECIAL", "GLYPH_BOSS"]
