import sys

from aliaslookup.main import main

sys.exit(main())
