"""Allow ``python -m territory_engine`` to replay a recorded track."""

import sys

from .tools.replay_track import main

if __name__ == "__main__":
    sys.exit(main())
