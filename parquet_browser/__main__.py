import sys

from parquet_browser.cli import main

sys.exit(main())
