"""Allow running the solver with `python -m gcdsudoku`."""

from gcdsudoku import main

main()
