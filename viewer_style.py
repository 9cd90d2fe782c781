# Colours and fonts shared by the viewer widgets
BG_MAIN = "#f2f2f2"
BG_TOOLBAR = "#2b2b2b"
BG_PANEL = "#ffffff"
BG_BUTTON = "#3c7dd9"
FG_BUTTON = "#ffffff"
FG_TEXT = "#222222"
FG_SUBTEXT = "#555555"

FONT_HEADER = ("Segoe UI", 11, "bold")
FONT_TEXT = ("Segoe UI", 10)
FONT_MONO = ("Consolas", 10)
FONT_BUTTON = ("Segoe UI", 10, "bold")
