import sys

from zone_migration.main import main

sys.exit(main())
