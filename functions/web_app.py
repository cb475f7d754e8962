"""
functions-framework entry point serving the Flask app
(chat proxy, health check, scheduled endpoint, service worker)
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from cmlb.app import create_app

app = create_app()

# functions-framework detects the Flask app and serves it on $PORT
cmlb_app = app
