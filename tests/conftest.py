import os

# headless runs never need an interactive matplotlib backend
os.environ.setdefault("MPLBACKEND", "Agg")
