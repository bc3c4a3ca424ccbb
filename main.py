"""Launch the number path puzzle window."""

import sys

from numberpath.ui.main import main


if __name__ == "__main__":
    sys.exit(main())
