"""Run the bridge: python -m parkbridge"""

import uvicorn
from parkbridge.config import settings


def main():
    uvicorn.run("parkbridge.main:app", host=settings.HOST, port=settings.PORT,
                log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
