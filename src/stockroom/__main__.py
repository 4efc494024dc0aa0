"""Allow `python -m stockroom`."""

from stockroom.bootstrap import main

main()
