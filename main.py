"""Entry point for running the command line client from a checkout.

This thin wrapper exposes ``potato_doctor.cli.main`` at the repository root so
that ``python main.py ping`` works without installing the console script.
The Streamlit front-end is started with ``streamlit run potato_doctor/app.py``.
"""

import sys

from potato_doctor.cli import main

if __name__ == "__main__":
    sys.exit(main())
