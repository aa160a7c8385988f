import logging

import uvicorn

from planner.api.api_run import app
from planner.utilities.config import APP_HOST, APP_PORT, DEBUG, LOG_LEVEL


def main():
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    local_url = f"http://{APP_HOST}:{APP_PORT}"
    print(f"Weekly planner running on {local_url} (Press CTRL+C to quit)")
    uvicorn.run(app, host=APP_HOST, port=APP_PORT, log_level="debug" if DEBUG else LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
