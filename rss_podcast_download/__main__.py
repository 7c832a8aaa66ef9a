"""Allow ``python -m rss_podcast_download``."""

import sys

from .cli import main

sys.exit(main())
