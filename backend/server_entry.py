from __future__ import annotations

import uvicorn

from careermatch.config import settings


def uvicorn_options() -> dict:
    return {
        "host": settings.host,
        "port": settings.port,
        "log_level": settings.log_level.lower(),
        "reload": False,
        "workers": 1,
    }


def main() -> None:
    uvicorn.run("careermatch.main:app", **uvicorn_options())


if __name__ == "__main__":
    main()
