"""finmate entrypoint.

Run with:
  python -m finmate
"""

import os
import uvicorn

from finmate.config import env_flag, load_settings
from finmate.logging_config import configure_logging


def main() -> None:
    host = os.getenv("FINMATE_HOST", "0.0.0.0")
    port = int(os.getenv("FINMATE_PORT", "8000"))
    reload = env_flag("FINMATE_RELOAD")
    # Fails fast when the secret is missing.
    settings = load_settings()
    configure_logging(settings.log_level)
    uvicorn.run("finmate.app:create_app", factory=True, host=host, port=port, reload=reload, log_config=None)

if __name__ == "__main__":
    main()
